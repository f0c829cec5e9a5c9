"""
Management command: seed_portal
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Provisions demo **officers**, **students** and **grievances** so the
officer client has something to work with.

The command is **idempotent**: officers are matched by mobile number,
students by ``student_ref`` and grievances by (student, subject).
Existing rows are left untouched, so grievances already claimed or
resolved keep their state.

Usage::

    python manage.py seed_portal
    python manage.py seed_portal --password 'S3cure!pass'

Prerequisites::

    python manage.py migrate
"""

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from grievances.models import Grievance, Student
from grievances.services import GrievanceSubmissionService

Officer = get_user_model()

# ────────────────────────────────────────────────────────────────────
# Demo data
# ────────────────────────────────────────────────────────────────────

DEMO_OFFICERS: list[dict[str, str]] = [
    {
        "mobile": "9000000001",
        "name": "Anita Rao",
        "email": "anita.rao@example.edu",
        "designation": "Grievance Officer",
        "department": "Student Affairs",
    },
    {
        "mobile": "9000000002",
        "name": "Vikram Sethi",
        "email": "vikram.sethi@example.edu",
        "designation": "Assistant Registrar",
        "department": "Examinations",
    },
]

DEMO_STUDENTS: list[dict] = [
    {
        "student_ref": "STU-1001",
        "name": "Priya Nair",
        "enrollment_number": "EN2023CS041",
        "mobile": "9111111111",
        "branch": "Computer Science",
        "year": 2,
        "college": "Engineering College",
    },
    {
        "student_ref": "STU-1002",
        "name": "Rahul Verma",
        "enrollment_number": "EN2022ME017",
        "mobile": "9222222222",
        "branch": "Mechanical",
        "year": 3,
        "college": "Engineering College",
    },
]

# student_ref → list of (subject, description)
DEMO_GRIEVANCES: dict[str, list[tuple[str, str]]] = {
    "STU-1001": [
        ("Hostel Wi-Fi outage", "The hostel block B network has been down for a week."),
        ("Library fine dispute", "I was fined for a book I returned on time."),
    ],
    "STU-1002": [
        ("Exam result not published", "My semester 5 result still shows as withheld."),
    ],
}

DEFAULT_PASSWORD = "Officer@12345"


class Command(BaseCommand):
    help = (
        "Creates demo officers, students and pending grievances.  "
        "Safe to run multiple times (idempotent)."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            default=DEFAULT_PASSWORD,
            help="Password assigned to newly created demo officers.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write(self.style.MIGRATE_HEADING(
            "\n══════════════════════════════════════════"
            "\n  Grievance Portal — Seeding Demo Data"
            "\n══════════════════════════════════════════\n"
        ))

        officers_created = 0
        for data in DEMO_OFFICERS:
            if Officer.objects.filter(mobile=data["mobile"]).exists():
                continue
            Officer.objects.create_user(password=options["password"], **data)
            officers_created += 1
            self.stdout.write(self.style.SUCCESS(
                f"  ✔  Officer {data['name']:<20s} (mobile {data['mobile']})"
            ))

        students: dict[str, Student] = {}
        students_created = 0
        for data in DEMO_STUDENTS:
            student, created = Student.objects.get_or_create(
                student_ref=data["student_ref"],
                defaults={k: v for k, v in data.items() if k != "student_ref"},
            )
            students[student.student_ref] = student
            if created:
                students_created += 1

        grievances_created = 0
        for student_ref, items in DEMO_GRIEVANCES.items():
            student = students[student_ref]
            for subject, description in items:
                if Grievance.objects.filter(student=student, subject=subject).exists():
                    continue
                GrievanceSubmissionService.submit(
                    student=student,
                    subject=subject,
                    description=description,
                )
                grievances_created += 1

        self.stdout.write(self.style.MIGRATE_HEADING(
            "\n──────────────────────────────────────────"
        ))
        self.stdout.write(self.style.SUCCESS(
            f"  Done!  {officers_created} officer(s), "
            f"{students_created} student(s), "
            f"{grievances_created} grievance(s) created.\n"
        ))
