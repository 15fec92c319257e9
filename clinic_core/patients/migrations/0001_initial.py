import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Patient",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("unique_id", models.CharField(max_length=280, unique=True)),
                ("name", models.CharField(max_length=255)),
                ("phone", models.CharField(max_length=32)),
                (
                    "registered_at",
                    models.DateTimeField(db_index=True, default=django.utils.timezone.now, editable=False),
                ),
            ],
            options={
                "db_table": "patients_patient",
                "indexes": [
                    models.Index(fields=["name"], name="patient_name_idx"),
                    models.Index(fields=["phone"], name="patient_phone_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Visit",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("date", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("symptoms", models.TextField(blank=True, default="")),
                ("bp_systolic", models.FloatField(blank=True, null=True)),
                ("bp_diastolic", models.FloatField(blank=True, null=True)),
                ("payment_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                (
                    "payment_mode",
                    models.CharField(
                        choices=[("CASH", "Cash"), ("UPI", "UPI"), ("CARD", "Card"), ("OTHER", "Other")],
                        default="CASH",
                        max_length=8,
                    ),
                ),
                (
                    "payment_status",
                    models.CharField(
                        choices=[("PENDING", "Pending"), ("PAID", "Paid")],
                        default="PENDING",
                        max_length=8,
                    ),
                ),
                ("notes", models.TextField(blank=True, default="")),
                ("diagnosis", models.TextField(blank=True, default="")),
                ("tests", models.JSONField(blank=True, default=list)),
                ("medicines", models.JSONField(blank=True, default=list)),
                ("advice", models.TextField(blank=True, default="")),
                (
                    "patient",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="visits",
                        to="patients.patient",
                    ),
                ),
            ],
            options={
                "db_table": "patients_visit",
                "ordering": ("created_at",),
                "indexes": [models.Index(fields=["patient", "-date"], name="visit_patient_date_idx")],
            },
        ),
        migrations.CreateModel(
            name="Report",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("stored_name", models.CharField(max_length=255, unique=True)),
                ("mime", models.CharField(blank=True, default="", max_length=127)),
                ("size", models.PositiveBigIntegerField(default=0)),
                ("uploaded_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "visit",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reports",
                        to="patients.visit",
                    ),
                ),
            ],
            options={
                "db_table": "patients_report",
                "ordering": ("uploaded_at", "created_at"),
            },
        ),
    ]
