import re

import pytest
from django.core.files.base import ContentFile
from django.core.files.uploadedfile import SimpleUploadedFile

from clinic_core.audit.models import AuditEvent
from clinic_core.common.errors import NotFoundError, ValidationError
from clinic_core.patients.models import Report
from clinic_core.patients.services import ReportService, VisitService
from clinic_core.patients.storage import ReportStorage

pytestmark = pytest.mark.django_db

PDF = b"%PDF-1.4\n%fake report\n"


@pytest.fixture
def visit(patient):
    return VisitService.add_visit(patient_id=patient.id, data={"symptoms": "Fever"})


def _upload(patient, visit, storage, content=PDF, filename="cbc.pdf", **kwargs):
    f = SimpleUploadedFile(filename, content, content_type="application/pdf")
    return ReportService.upload(patient_id=patient.id, visit_id=visit.id, file=f, storage=storage, **kwargs)


def test_generate_name_shape():
    name = ReportStorage.generate_name("Scan Result.JPG")

    assert re.fullmatch(r"\d{13}-[0-9a-f]{32}\.jpg", name)
    assert ReportStorage.generate_name("x.pdf") != ReportStorage.generate_name("x.pdf")


def test_upload_stores_bytes_and_metadata(patient, visit, storage):
    reports = _upload(patient, visit, storage, name="CBC March")

    assert len(reports) == 1
    r = reports[0]
    assert r.name == "CBC March"
    assert r.mime == "application/pdf"
    assert r.size == len(PDF)
    assert storage.path(r.stored_name).read_bytes() == PDF
    assert r.url == f"/api/v1/patients/{patient.id}/visits/{visit.id}/reports/{r.id}/download/"


def test_upload_name_defaults_to_filename(patient, visit, storage):
    reports = _upload(patient, visit, storage, filename="xray.png")

    assert reports[0].name == "xray.png"


def test_upload_guesses_mime_without_declared_type(patient, visit, storage):
    f = ContentFile(b"plain text", name="notes.txt")
    reports = ReportService.upload(patient_id=patient.id, visit_id=visit.id, file=f, storage=storage)

    assert reports[0].mime == "text/plain"


def test_upload_returns_all_reports_of_visit(patient, visit, storage):
    _upload(patient, visit, storage, filename="a.pdf")
    reports = _upload(patient, visit, storage, filename="b.pdf")

    assert [r.name for r in reports] == ["a.pdf", "b.pdf"]


def test_upload_rejects_missing_or_empty_file(patient, visit, storage):
    with pytest.raises(ValidationError):
        ReportService.upload(patient_id=patient.id, visit_id=visit.id, file=None, storage=storage)

    with pytest.raises(ValidationError):
        _upload(patient, visit, storage, content=b"")

    assert Report.objects.count() == 0


def test_upload_to_unknown_visit_is_not_found(patient, storage):
    f = SimpleUploadedFile("a.pdf", PDF)
    with pytest.raises(NotFoundError):
        ReportService.upload(
            patient_id=patient.id,
            visit_id="00000000-0000-0000-0000-000000000000",
            file=f,
            storage=storage,
        )


def test_visit_of_other_patient_is_not_found(patient, visit, storage):
    from clinic_core.patients.services import PatientService

    other = PatientService.create_patient(name="Other", phone="9000000009")
    f = SimpleUploadedFile("a.pdf", PDF)

    with pytest.raises(NotFoundError):
        ReportService.upload(patient_id=other.id, visit_id=visit.id, file=f, storage=storage)


def test_download_returns_stored_bytes(patient, visit, storage):
    r = _upload(patient, visit, storage)[0]

    report, fh = ReportService.open_download(
        patient_id=patient.id, visit_id=visit.id, report_id=r.id, storage=storage
    )
    with fh:
        assert fh.read() == PDF
    assert report.id == r.id


def test_download_missing_file_is_not_found(patient, visit, storage):
    r = _upload(patient, visit, storage)[0]
    storage.path(r.stored_name).unlink()

    with pytest.raises(NotFoundError):
        ReportService.open_download(patient_id=patient.id, visit_id=visit.id, report_id=r.id, storage=storage)


def test_delete_removes_row_and_file(patient, visit, storage):
    r = _upload(patient, visit, storage)[0]
    path = storage.path(r.stored_name)

    ReportService.delete(patient_id=patient.id, visit_id=visit.id, report_id=r.id, storage=storage)

    assert not Report.objects.filter(id=r.id).exists()
    assert not path.exists()
    assert AuditEvent.objects.filter(event_code="report.deleted", entity_id=r.id).exists()


def test_delete_succeeds_when_file_already_gone(patient, visit, storage):
    r = _upload(patient, visit, storage)[0]
    storage.path(r.stored_name).unlink()

    ReportService.delete(patient_id=patient.id, visit_id=visit.id, report_id=r.id, storage=storage)

    assert visit.reports.count() == 0


def test_delete_swallows_storage_errors(patient, visit, storage, monkeypatch, caplog):
    r = _upload(patient, visit, storage)[0]

    def fail(name):
        raise PermissionError("read-only volume")

    monkeypatch.setattr(storage, "delete", fail)

    ReportService.delete(patient_id=patient.id, visit_id=visit.id, report_id=r.id, storage=storage)

    assert not Report.objects.filter(id=r.id).exists()
    assert "could not remove report file" in caplog.text


def test_delete_unknown_report_is_not_found(patient, visit, storage):
    with pytest.raises(NotFoundError):
        ReportService.delete(
            patient_id=patient.id,
            visit_id=visit.id,
            report_id="00000000-0000-0000-0000-000000000000",
            storage=storage,
        )


def test_upload_rejects_overlong_name(patient, visit, storage):
    with pytest.raises(ValidationError) as exc:
        _upload(patient, visit, storage, name="n" * 256)

    assert "name" in exc.value.details
    assert Report.objects.count() == 0
    assert not storage.location.exists() or not any(storage.location.iterdir())
