from django.contrib import admin

from .models import Grievance, GrievanceStatusLog, Student
from .services import GrievanceSubmissionService


class GrievanceStatusLogInline(admin.TabularInline):
    model = GrievanceStatusLog
    extra = 0
    can_delete = False
    readonly_fields = ("from_status", "to_status", "changed_by",
                       "message", "created_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ("student_ref", "name", "enrollment_number",
                    "branch", "year", "college")
    search_fields = ("student_ref", "name", "enrollment_number")
    list_filter = ("college", "branch", "year")


@admin.register(Grievance)
class GrievanceAdmin(admin.ModelAdmin):
    list_display = ("id", "subject", "student", "status", "handled_by",
                    "deadline", "created_at")
    list_filter = ("status",)
    search_fields = ("subject", "description", "student__name")
    list_select_related = ("student", "handled_by")
    inlines = [GrievanceStatusLogInline]

    # Workflow fields only change through claim / resolve.
    workflow_fields = ("status", "handled_by", "remarks", "claimed_at",
                       "resolved_at", "created_at", "updated_at")

    def get_readonly_fields(self, request, obj=None):
        if obj is None:
            return self.workflow_fields + ("deadline",)
        return self.workflow_fields + ("student", "subject", "description",
                                       "attachment", "deadline")

    def save_model(self, request, obj, form, change):
        if change:
            super().save_model(request, obj, form, change)
            return
        created = GrievanceSubmissionService.submit(
            student=obj.student,
            subject=obj.subject,
            description=obj.description,
            attachment=obj.attachment,
        )
        obj.pk = created.pk
        obj.refresh_from_db()


@admin.register(GrievanceStatusLog)
class GrievanceStatusLogAdmin(admin.ModelAdmin):
    list_display = ("grievance", "from_status", "to_status",
                    "changed_by", "created_at")
    list_filter = ("to_status",)
    readonly_fields = ("grievance", "from_status", "to_status",
                       "changed_by", "message", "created_at")
