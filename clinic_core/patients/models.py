# clinic_core/patients/models.py
from __future__ import annotations

import re

from django.db import models
from django.urls import reverse
from django.utils import timezone

from clinic_core.common.models import UUIDModel

_NON_DIGITS = re.compile(r"\D+")
_WHITESPACE = re.compile(r"\s+")

NAME_MAX_LENGTH = 255
# room for NAME_MAX_LENGTH + "_" + 10 digits
UNIQUE_ID_MAX_LENGTH = 280


def digits_only(value) -> str:
    return _NON_DIGITS.sub("", str(value or ""))


def make_unique_id(name: str, phone: str) -> str:
    """
    "Asha Rao", "98765-432-10" -> "ASHARAO_9876543210"
    """
    n = _WHITESPACE.sub("", name or "").upper()
    p = digits_only(phone)
    return f"{n}_{p}" if n and p else ""


class Patient(UUIDModel):
    """
    Aggregate root. Visits and their reports are only written through
    the patient services.
    """
    unique_id = models.CharField(max_length=UNIQUE_ID_MAX_LENGTH, unique=True)
    name = models.CharField(max_length=NAME_MAX_LENGTH)
    phone = models.CharField(max_length=32)
    registered_at = models.DateTimeField(default=timezone.now, editable=False, db_index=True)

    class Meta:
        db_table = "patients_patient"
        indexes = [
            models.Index(fields=["name"], name="patient_name_idx"),
            models.Index(fields=["phone"], name="patient_phone_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.unique_id})"

    def save(self, *args, **kwargs):
        self.name = (self.name or "").strip().upper()
        self.phone = digits_only(self.phone)
        # an explicit unique_id is kept (upper-cased); otherwise derive it
        if self.unique_id:
            self.unique_id = str(self.unique_id).strip().upper()
        else:
            self.unique_id = make_unique_id(self.name, self.phone)
        super().save(*args, **kwargs)


class PaymentMode(models.TextChoices):
    CASH = "CASH", "Cash"
    UPI = "UPI", "UPI"
    CARD = "CARD", "Card"
    OTHER = "OTHER", "Other"


class PaymentStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    PAID = "PAID", "Paid"


class Visit(UUIDModel):
    """
    One clinical encounter: frontdesk triage plus the doctor's consultation.
    """
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="visits")
    date = models.DateTimeField(default=timezone.now, db_index=True)

    # frontdesk
    symptoms = models.TextField(blank=True, default="")
    bp_systolic = models.FloatField(null=True, blank=True)
    bp_diastolic = models.FloatField(null=True, blank=True)
    payment_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    payment_mode = models.CharField(max_length=8, choices=PaymentMode.choices, default=PaymentMode.CASH)
    payment_status = models.CharField(max_length=8, choices=PaymentStatus.choices, default=PaymentStatus.PENDING)
    notes = models.TextField(blank=True, default="")

    # doctor
    diagnosis = models.TextField(blank=True, default="")
    tests = models.JSONField(default=list, blank=True)
    medicines = models.JSONField(default=list, blank=True)
    advice = models.TextField(blank=True, default="")

    class Meta:
        db_table = "patients_visit"
        ordering = ("created_at",)
        indexes = [
            models.Index(fields=["patient", "-date"], name="visit_patient_date_idx"),
        ]

    def __str__(self) -> str:
        return f"Visit({self.patient_id}, {self.date:%Y-%m-%d})"


class Report(UUIDModel):
    """
    Metadata of an uploaded file. The bytes live in ReportStorage under stored_name.
    """
    visit = models.ForeignKey(Visit, on_delete=models.CASCADE, related_name="reports")

    name = models.CharField(max_length=NAME_MAX_LENGTH)
    stored_name = models.CharField(max_length=255, unique=True)
    mime = models.CharField(max_length=127, blank=True, default="")
    size = models.PositiveBigIntegerField(default=0)
    uploaded_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "patients_report"
        ordering = ("uploaded_at", "created_at")

    def __str__(self) -> str:
        return f"{self.name} -> {self.stored_name}"

    @property
    def url(self) -> str:
        # derived from the three ids, never stored
        return reverse(
            "patient-report-download",
            kwargs={
                "patient_id": self.visit.patient_id,
                "visit_id": self.visit_id,
                "report_id": self.id,
            },
        )
