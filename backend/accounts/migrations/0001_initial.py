import accounts.models
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="Officer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                ("is_superuser", models.BooleanField(default=False, help_text="Designates that this user has all permissions without explicitly assigning them.", verbose_name="superuser status")),
                ("is_staff", models.BooleanField(default=False, help_text="Designates whether the user can log into this admin site.", verbose_name="staff status")),
                ("is_active", models.BooleanField(default=True, help_text="Designates whether this user should be treated as active. Unselect this instead of deleting accounts.", verbose_name="active")),
                ("date_joined", models.DateTimeField(default=django.utils.timezone.now, verbose_name="date joined")),
                ("name", models.CharField(max_length=150, verbose_name="Full Name")),
                ("mobile", models.CharField(help_text="Login credential. Stored without spaces or dashes.", max_length=20, unique=True, verbose_name="Mobile Number")),
                ("email", models.EmailField(blank=True, default="", max_length=254, verbose_name="Email Address")),
                ("designation", models.CharField(blank=True, default="", max_length=100, verbose_name="Designation")),
                ("department", models.CharField(blank=True, default="", max_length=100, verbose_name="Department")),
                ("profile_photo", models.ImageField(blank=True, null=True, upload_to=accounts.models.officer_photo_path, verbose_name="Profile Photo")),
                ("groups", models.ManyToManyField(blank=True, help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.", related_name="user_set", related_query_name="user", to="auth.group", verbose_name="groups")),
                ("user_permissions", models.ManyToManyField(blank=True, help_text="Specific permissions for this user.", related_name="user_set", related_query_name="user", to="auth.permission", verbose_name="user permissions")),
            ],
            options={
                "verbose_name": "Officer",
                "verbose_name_plural": "Officers",
                "ordering": ["name"],
            },
            managers=[
                ("objects", accounts.models.OfficerManager()),
            ],
        ),
    ]
