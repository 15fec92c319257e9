import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from clinic_core.patients.services import ReportService, VisitService
from clinic_core.patients.storage import get_report_storage

pytestmark = pytest.mark.django_db


@pytest.fixture
def report(patient, reports_dir):
    visit = VisitService.add_visit(patient_id=patient.id, data={})
    return ReportService.upload(
        patient_id=patient.id,
        visit_id=visit.id,
        file=SimpleUploadedFile("a.pdf", b"%PDF"),
        storage=get_report_storage(),
    )[0]


def _detail_url(report):
    return f"/api/v1/patients/{report.visit.patient_id}/visits/{report.visit_id}/reports/{report.id}/"


def test_doctor_cannot_register_patients(doctor_client):
    r = doctor_client.post("/api/v1/patients/", {"name": "X", "phone": "9000000000"}, format="json")

    assert r.status_code == 403
    assert r.data["error"]["code"] == "permission_denied"


def test_doctor_can_search_and_add_visits(doctor_client, patient):
    assert doctor_client.get("/api/v1/patients/").status_code == 200
    assert doctor_client.post(f"/api/v1/patients/{patient.id}/visits/", {}, format="json").status_code == 201


def test_frontdesk_cannot_delete_reports(frontdesk_client, report):
    r = frontdesk_client.delete(_detail_url(report))

    assert r.status_code == 403


def test_frontdesk_can_download_reports(frontdesk_client, report):
    r = frontdesk_client.get(report.url)

    assert r.status_code == 200
    r.close()


def test_doctor_can_delete_reports(doctor_client, report):
    assert doctor_client.delete(_detail_url(report)).status_code == 200


def test_anonymous_is_rejected(anon_client, patient):
    r = anon_client.get("/api/v1/patients/")

    assert r.status_code == 401
    assert r.data["error"]["code"] == "not_authenticated"


def test_health_is_public(anon_client):
    r = anon_client.get("/api/v1/health/")

    assert r.status_code == 200
    assert r.data["status"] == "healthy"
