from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.forms import UserChangeForm, UserCreationForm

from .models import Officer


class OfficerCreationForm(UserCreationForm):
    class Meta(UserCreationForm.Meta):
        model = Officer
        fields = ("mobile", "name", "email", "designation", "department")


class OfficerChangeForm(UserChangeForm):
    class Meta(UserChangeForm.Meta):
        model = Officer
        fields = "__all__"


@admin.register(Officer)
class OfficerAdmin(BaseUserAdmin):
    form = OfficerChangeForm
    add_form = OfficerCreationForm
    list_display = ("mobile", "name", "email", "designation",
                    "department", "is_active")
    search_fields = ("mobile", "name", "email")
    list_filter = ("is_active", "is_staff", "department")
    ordering = ("name",)
    filter_horizontal = ("groups", "user_permissions")
    fieldsets = (
        (None, {"fields": ("mobile", "password")}),
        ("Profile", {"fields": ("name", "email", "designation",
                                "department", "profile_photo")}),
        ("Access", {"fields": ("is_active", "is_staff", "is_superuser",
                               "groups", "user_permissions")}),
        ("Dates", {"fields": ("last_login", "date_joined")}),
    )
    add_fieldsets = (
        (None, {
            "classes": ("wide",),
            "fields": ("mobile", "name", "email", "designation",
                       "department", "password1", "password2"),
        }),
    )
