# clinic_core/patients/services.py
from __future__ import annotations

import logging
import mimetypes
import re
from pathlib import Path
from typing import Any, Dict, List, Tuple
from uuid import UUID

from django.core.files import File
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from clinic_core.audit.models import AuditEventCode
from clinic_core.audit.services import AuditService
from clinic_core.common.errors import (
    ConflictError,
    DomainError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from clinic_core.patients.models import (
    NAME_MAX_LENGTH,
    UNIQUE_ID_MAX_LENGTH,
    Patient,
    PaymentMode,
    PaymentStatus,
    Report,
    Visit,
    digits_only,
    make_unique_id,
)
from clinic_core.patients.selectors import get_report, get_visit, list_reports, require_patient_id
from clinic_core.patients.storage import ReportStorage
from clinic_core.suggestions.services import SuggestionService

logger = logging.getLogger(__name__)

PHONE_RE = re.compile(r"^\d{10}$")
DEFAULT_MIME = "application/octet-stream"


class PatientService:
    @staticmethod
    @transaction.atomic
    def create_patient(
        *,
        name: str,
        phone: str,
        unique_id: str | None = None,
        actor_user_id: UUID | None = None,
    ) -> Patient:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Name is required.", details={"name": "This field is required."})
        if len(name) > NAME_MAX_LENGTH:
            raise ValidationError(
                f"Name must be at most {NAME_MAX_LENGTH} characters.",
                details={"name": f"Ensure this field has no more than {NAME_MAX_LENGTH} characters."},
            )

        clean_phone = digits_only(phone)
        if not PHONE_RE.match(clean_phone):
            raise ValidationError(
                "Phone must be exactly 10 digits.",
                details={"phone": "Phone must be exactly 10 digits."},
            )

        uid = (unique_id or "").strip().upper() or make_unique_id(name, clean_phone)
        if len(uid) > UNIQUE_ID_MAX_LENGTH:
            raise ValidationError(
                f"Unique id must be at most {UNIQUE_ID_MAX_LENGTH} characters.",
                details={"unique_id": f"Ensure this field has no more than {UNIQUE_ID_MAX_LENGTH} characters."},
            )
        if Patient.objects.filter(unique_id=uid).exists():
            raise ConflictError(f"Patient {uid} already exists.", details={"unique_id": uid})

        try:
            with transaction.atomic():
                patient = Patient.objects.create(name=name, phone=clean_phone, unique_id=uid)
        except IntegrityError:
            # lost a race against a concurrent create with the same unique_id
            raise ConflictError(f"Patient {uid} already exists.", details={"unique_id": uid})

        AuditService.log(
            event_code=AuditEventCode.PATIENT_CREATED,
            entity_type="Patient",
            entity_id=patient.id,
            actor_user_id=actor_user_id,
            metadata={"unique_id": patient.unique_id},
        )
        logger.info("patient %s registered", patient.unique_id)
        return patient


def _visit_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    bp = data.get("bp") or {}
    payment = data.get("payment") or {}

    tests = data.get("tests") or []
    medicines = data.get("medicines") or []
    if isinstance(tests, str) or isinstance(medicines, str):
        raise ValidationError("tests and medicines must be lists.")

    mode = payment.get("mode") or PaymentMode.CASH
    status = payment.get("status") or PaymentStatus.PENDING
    if mode not in PaymentMode.values:
        raise ValidationError("Unknown payment mode.", details={"payment": {"mode": mode}})
    if status not in PaymentStatus.values:
        raise ValidationError("Unknown payment status.", details={"payment": {"status": status}})

    return {
        "date": data.get("date") or timezone.now(),
        "symptoms": data.get("symptoms") or "",
        "bp_systolic": bp.get("systolic"),
        "bp_diastolic": bp.get("diastolic"),
        "payment_amount": payment.get("amount"),
        "payment_mode": mode,
        "payment_status": status,
        "notes": data.get("notes") or "",
        "diagnosis": data.get("diagnosis") or "",
        "tests": list(tests),
        "medicines": list(medicines),
        "advice": data.get("advice") or "",
    }


class VisitService:
    @staticmethod
    @transaction.atomic
    def add_visit(
        *,
        patient_id: UUID | str,
        data: Dict[str, Any],
        actor_user_id: UUID | None = None,
    ) -> Visit:
        """
        Append one visit. A single INSERT bound to the patient; the patient
        row itself is never rewritten, so concurrent appends all persist.
        """
        pid = require_patient_id(patient_id)
        visit = Visit.objects.create(patient_id=pid, **_visit_fields(data))

        AuditService.log(
            event_code=AuditEventCode.VISIT_ADDED,
            entity_type="Visit",
            entity_id=visit.id,
            actor_user_id=actor_user_id,
            metadata={"patient_id": str(pid)},
        )

        try:
            with transaction.atomic():
                SuggestionService.record_visit_terms(
                    symptoms=visit.symptoms,
                    medicines=visit.medicines,
                )
        except (DatabaseError, DomainError):
            logger.warning("suggestion update failed for visit %s", visit.id, exc_info=True)

        return visit


class ReportService:
    """
    Report files for a visit. The storage is passed in by the caller.
    """

    @staticmethod
    def upload(
        *,
        patient_id: UUID | str,
        visit_id: UUID | str,
        file,
        storage: ReportStorage,
        name: str | None = None,
        actor_user_id: UUID | None = None,
    ) -> List[Report]:
        visit = get_visit(patient_id=patient_id, visit_id=visit_id)

        if file is None or not getattr(file, "size", 0):
            raise ValidationError("No file uploaded.", details={"file": "A non-empty file is required."})

        original = Path(getattr(file, "name", "") or "").name
        display_name = (name or "").strip()
        if len(display_name) > NAME_MAX_LENGTH:
            raise ValidationError(
                f"Report name must be at most {NAME_MAX_LENGTH} characters.",
                details={"name": f"Ensure this field has no more than {NAME_MAX_LENGTH} characters."},
            )
        display_name = display_name or original[-NAME_MAX_LENGTH:]
        mime = (
            getattr(file, "content_type", None)
            or mimetypes.guess_type(original)[0]
            or DEFAULT_MIME
        )
        if len(mime) > Report._meta.get_field("mime").max_length:
            mime = DEFAULT_MIME

        stored_name = storage.save(ReportStorage.generate_name(original), file)

        try:
            with transaction.atomic():
                report = Report.objects.create(
                    visit=visit,
                    name=display_name or stored_name,
                    stored_name=stored_name,
                    mime=mime,
                    size=file.size,
                )
                AuditService.log(
                    event_code=AuditEventCode.REPORT_UPLOADED,
                    entity_type="Report",
                    entity_id=report.id,
                    actor_user_id=actor_user_id,
                    metadata={
                        "patient_id": str(visit.patient_id),
                        "visit_id": str(visit.id),
                        "stored_name": stored_name,
                        "size": file.size,
                    },
                )
        except DatabaseError as exc:
            _remove_file(storage, stored_name)
            raise StorageError("Could not record report.") from exc

        logger.info("report %s stored for visit %s (%s bytes)", stored_name, visit.id, file.size)
        return list_reports(patient_id=visit.patient_id, visit_id=visit.id)

    @staticmethod
    def delete(
        *,
        patient_id: UUID | str,
        visit_id: UUID | str,
        report_id: UUID | str,
        storage: ReportStorage,
        actor_user_id: UUID | None = None,
    ) -> None:
        report = get_report(patient_id=patient_id, visit_id=visit_id, report_id=report_id)
        stored_name = report.stored_name

        with transaction.atomic():
            Report.objects.filter(id=report.id).delete()
            AuditService.log(
                event_code=AuditEventCode.REPORT_DELETED,
                entity_type="Report",
                entity_id=report.id,
                actor_user_id=actor_user_id,
                metadata={"visit_id": str(report.visit_id), "stored_name": stored_name},
            )

        _remove_file(storage, stored_name)

    @staticmethod
    def open_download(
        *,
        patient_id: UUID | str,
        visit_id: UUID | str,
        report_id: UUID | str,
        storage: ReportStorage,
    ) -> Tuple[Report, File]:
        report = get_report(patient_id=patient_id, visit_id=visit_id, report_id=report_id)
        if not storage.exists(report.stored_name):
            raise NotFoundError("File missing on disk.", details={"report_id": str(report.id)})
        return report, storage.open(report.stored_name)


def _remove_file(storage: ReportStorage, stored_name: str) -> None:
    try:
        storage.delete(stored_name)
    except OSError:
        logger.warning("could not remove report file %s", stored_name, exc_info=True)
