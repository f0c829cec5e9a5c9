import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Student",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("student_ref", models.CharField(max_length=64, unique=True, verbose_name="External Student ID")),
                ("name", models.CharField(max_length=150, verbose_name="Name")),
                ("enrollment_number", models.CharField(blank=True, db_index=True, default="", max_length=50, verbose_name="Enrollment Number")),
                ("mobile", models.CharField(blank=True, default="", max_length=20, verbose_name="Mobile")),
                ("branch", models.CharField(blank=True, default="", max_length=100, verbose_name="Branch")),
                ("year", models.PositiveSmallIntegerField(blank=True, null=True, verbose_name="Year")),
                ("college", models.CharField(blank=True, default="", max_length=200, verbose_name="College")),
            ],
            options={
                "verbose_name": "Student",
                "verbose_name_plural": "Students",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Grievance",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("subject", models.CharField(max_length=255, verbose_name="Subject")),
                ("description", models.TextField(verbose_name="Description")),
                ("attachment", models.URLField(blank=True, max_length=500, null=True, verbose_name="Attachment URL")),
                ("status", models.CharField(choices=[("Pending", "Pending"), ("In Progress", "In Progress"), ("Resolved", "Resolved"), ("Rejected", "Rejected")], db_index=True, default="Pending", max_length=20, verbose_name="Status")),
                ("remarks", models.TextField(blank=True, null=True, verbose_name="Resolution Remarks")),
                ("deadline", models.DateTimeField(verbose_name="Deadline")),
                ("claimed_at", models.DateTimeField(blank=True, null=True, verbose_name="Claimed At")),
                ("resolved_at", models.DateTimeField(blank=True, null=True, verbose_name="Resolved At")),
                ("handled_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="handled_grievances", to=settings.AUTH_USER_MODEL, verbose_name="Handled By")),
                ("student", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="grievances", to="grievances.student", verbose_name="Student")),
            ],
            options={
                "verbose_name": "Grievance",
                "verbose_name_plural": "Grievances",
                "ordering": ["created_at", "id"],
                "indexes": [models.Index(fields=["handled_by", "status"], name="grievance_handler_status_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=(
                            models.Q(("handled_by__isnull", True), ("status", "Pending"))
                            | models.Q(
                                ("status__in", ["In Progress", "Resolved", "Rejected"]),
                                ("handled_by__isnull", False),
                            )
                        ),
                        name="grievance_handled_by_matches_status",
                    ),
                    models.CheckConstraint(
                        condition=(
                            models.Q(
                                ("status__in", ["Resolved", "Rejected"]),
                                ("remarks__isnull", False),
                                ("resolved_at__isnull", False),
                            )
                            | models.Q(
                                ("status__in", ["Pending", "In Progress"]),
                                ("remarks__isnull", True),
                                ("resolved_at__isnull", True),
                            )
                        ),
                        name="grievance_resolution_matches_status",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="GrievanceStatusLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("from_status", models.CharField(blank=True, choices=[("Pending", "Pending"), ("In Progress", "In Progress"), ("Resolved", "Resolved"), ("Rejected", "Rejected")], default="", max_length=20, verbose_name="Previous Status")),
                ("to_status", models.CharField(choices=[("Pending", "Pending"), ("In Progress", "In Progress"), ("Resolved", "Resolved"), ("Rejected", "Rejected")], max_length=20, verbose_name="New Status")),
                ("message", models.TextField(blank=True, default="", verbose_name="Message")),
                ("changed_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="grievance_status_changes", to=settings.AUTH_USER_MODEL, verbose_name="Changed By")),
                ("grievance", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="status_logs", to="grievances.grievance", verbose_name="Grievance")),
            ],
            options={
                "verbose_name": "Grievance Status Log",
                "verbose_name_plural": "Grievance Status Logs",
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
