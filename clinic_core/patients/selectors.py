# clinic_core/patients/selectors.py
from __future__ import annotations

from datetime import date
from typing import List, Tuple
from uuid import UUID

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import QuerySet

from clinic_core.common.errors import NotFoundError, ValidationError
from clinic_core.patients.filters import PatientSearchFilter
from clinic_core.patients.models import Patient, Report, Visit

_LOOKUP_ERRORS = (DjangoValidationError, ValueError, TypeError)


def get_patient(*, patient_id: UUID | str) -> Patient:
    try:
        return Patient.objects.prefetch_related("visits__reports").get(id=patient_id)
    except (Patient.DoesNotExist, *_LOOKUP_ERRORS):
        raise NotFoundError("Patient not found.", details={"patient_id": str(patient_id)})


def require_patient_id(patient_id: UUID | str) -> UUID:
    try:
        return Patient.objects.values_list("id", flat=True).get(id=patient_id)
    except (Patient.DoesNotExist, *_LOOKUP_ERRORS):
        raise NotFoundError("Patient not found.", details={"patient_id": str(patient_id)})


def get_visit(*, patient_id: UUID | str, visit_id: UUID | str) -> Visit:
    pid = require_patient_id(patient_id)
    try:
        return Visit.objects.select_related("patient").get(id=visit_id, patient_id=pid)
    except (Visit.DoesNotExist, *_LOOKUP_ERRORS):
        raise NotFoundError("Visit not found.", details={"visit_id": str(visit_id)})


def get_report(*, patient_id: UUID | str, visit_id: UUID | str, report_id: UUID | str) -> Report:
    visit = get_visit(patient_id=patient_id, visit_id=visit_id)
    try:
        return Report.objects.select_related("visit").get(id=report_id, visit_id=visit.id)
    except (Report.DoesNotExist, *_LOOKUP_ERRORS):
        raise NotFoundError("Report not found.", details={"report_id": str(report_id)})


def search_patients(
    *,
    q: str | None = None,
    date_from: date | str | None = None,
    date_to: date | str | None = None,
    limit: int | None = None,
) -> QuerySet[Patient]:
    limit = limit or settings.PATIENT_SEARCH_LIMIT

    fs = PatientSearchFilter(
        data={"q": q or "", "date_from": date_from or "", "date_to": date_to or ""},
        queryset=Patient.objects.all(),
    )
    if not fs.is_valid():
        raise ValidationError(
            "Invalid search parameters.",
            details={k: [str(e) for e in v] for k, v in fs.errors.items()},
        )

    return (
        fs.qs.prefetch_related("visits__reports")
        .order_by("-registered_at", "-created_at")[:limit]
    )


def list_visits(*, patient_id: UUID | str) -> Tuple[Patient, List[Visit]]:
    """
    Visits newest first. Stored order is insertion order; sorting happens here.
    """
    patient = get_patient(patient_id=patient_id)
    visits = sorted(patient.visits.all(), key=lambda v: (v.date, v.created_at), reverse=True)
    return patient, visits


def list_reports(*, patient_id: UUID | str, visit_id: UUID | str) -> List[Report]:
    visit = get_visit(patient_id=patient_id, visit_id=visit_id)
    return list(Report.objects.select_related("visit").filter(visit_id=visit.id))
