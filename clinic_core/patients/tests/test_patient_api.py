from urllib.parse import quote

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

pytestmark = pytest.mark.django_db

PNG = b"\x89PNG\r\n\x1a\n" + bytes(range(256))


def _create_patient(client, **overrides):
    payload = {"name": "Asha Rao", "phone": "98765-43210"}
    payload.update(overrides)
    return client.post("/api/v1/patients/", payload, format="json")


def _add_visit(client, pid, **payload):
    return client.post(f"/api/v1/patients/{pid}/visits/", payload, format="json")


def _reports_url(pid, vid):
    return f"/api/v1/patients/{pid}/visits/{vid}/reports/"


def test_create_and_retrieve(frontdesk_client):
    r = _create_patient(frontdesk_client)
    assert r.status_code == 201, r.data
    assert r.data["unique_id"] == "ASHARAO_9876543210"
    assert r.data["phone"] == "9876543210"
    assert r.data["visits"] == []

    g = frontdesk_client.get(f"/api/v1/patients/{r.data['id']}/")
    assert g.status_code == 200
    assert g.data["name"] == "ASHA RAO"


def test_create_duplicate_is_409(frontdesk_client):
    assert _create_patient(frontdesk_client).status_code == 201

    r = _create_patient(frontdesk_client, name="asha  rao")
    assert r.status_code == 409
    assert r.data["error"]["code"] == "conflict"
    assert r.data["error"]["request_id"]


def test_create_bad_phone_is_400(frontdesk_client):
    r = _create_patient(frontdesk_client, phone="123")

    assert r.status_code == 400
    assert r.data["error"]["code"] == "validation_error"
    assert "phone" in r.data["error"]["details"]


def test_create_rejects_unknown_fields(frontdesk_client):
    r = _create_patient(frontdesk_client, visits=[{"symptoms": "x"}])

    assert r.status_code == 400
    assert "visits" in r.data["error"]["details"]


def test_retrieve_unknown_is_404_envelope(api_client):
    r = api_client.get("/api/v1/patients/00000000-0000-0000-0000-000000000000/")

    assert r.status_code == 404
    assert r.data["error"]["code"] == "not_found"


def test_list_search_params(api_client):
    _create_patient(api_client)
    _create_patient(api_client, name="Vikram", phone="9123456780")

    r = api_client.get("/api/v1/patients/", {"q": "vik"})
    assert r.status_code == 200
    assert [p["name"] for p in r.data] == ["VIKRAM"]

    r = api_client.get("/api/v1/patients/", {"from": "2000-01-01", "to": "2000-01-02"})
    assert r.status_code == 200
    assert r.data == []

    r = api_client.get("/api/v1/patients/", {"from": "yesterday"})
    assert r.status_code == 400


def test_visits_post_and_list(doctor_client, patient):
    a = _add_visit(doctor_client, patient.id, date="2024-01-01T10:00:00+05:30", tests="CBC, LFT")
    b = _add_visit(doctor_client, patient.id, date="2024-02-01T10:00:00+05:30", tests=["CBC", "LFT"])
    assert a.status_code == 201, a.data
    assert b.status_code == 201, b.data
    assert a.data["tests"] == b.data["tests"] == ["CBC", "LFT"]
    assert a.data["payment"] == {"amount": None, "mode": "CASH", "status": "PENDING"}

    r = doctor_client.get(f"/api/v1/patients/{patient.id}/visits/")
    assert r.status_code == 200
    assert r.data["patient_id"] == str(patient.id)
    assert r.data["unique_id"] == patient.unique_id
    assert r.data["name"] == patient.name
    assert [v["id"] for v in r.data["visits"]] == [b.data["id"], a.data["id"]]


def test_visit_input_validation(doctor_client, patient):
    r = _add_visit(doctor_client, patient.id, payment={"mode": "BITCOIN"})
    assert r.status_code == 400

    r = _add_visit(doctor_client, patient.id, bp={"systolic": 120, "pulse": 70})
    assert r.status_code == 400
    assert r.data["error"]["code"] == "validation_error"


def test_visits_unknown_patient_is_404(doctor_client):
    r = _add_visit(doctor_client, "00000000-0000-0000-0000-000000000000", symptoms="x")

    assert r.status_code == 404


def test_report_upload_download_delete(doctor_client, patient, reports_dir):
    vid = _add_visit(doctor_client, patient.id, symptoms="Fever").data["id"]

    up = doctor_client.post(
        _reports_url(patient.id, vid),
        {"file": SimpleUploadedFile("chest x-ray (1).png", PNG, content_type="image/png")},
        format="multipart",
    )
    assert up.status_code == 201, up.data
    assert len(up.data) == 1
    report = up.data[0]
    assert report["name"] == "chest x-ray (1).png"
    assert report["size"] == len(PNG)
    assert (reports_dir / report["stored_name"]).exists()

    listed = doctor_client.get(_reports_url(patient.id, vid))
    assert [x["id"] for x in listed.data] == [report["id"]]

    dl = doctor_client.get(report["url"])
    assert dl.status_code == 200
    assert dl["Content-Type"] == "image/png"
    assert dl["Content-Disposition"] == f'inline; filename="{quote("chest x-ray (1).png")}"'
    assert b"".join(dl.streaming_content) == PNG
    dl.close()

    rm = doctor_client.delete(f"{_reports_url(patient.id, vid)}{report['id']}/")
    assert rm.status_code == 200
    assert rm.data == {"detail": "Report deleted."}
    assert not (reports_dir / report["stored_name"]).exists()

    gone = doctor_client.get(report["url"])
    assert gone.status_code == 404
    assert gone.data["error"]["code"] == "not_found"


def test_report_upload_custom_name(frontdesk_client, patient, reports_dir):
    vid = _add_visit(frontdesk_client, patient.id).data["id"]

    up = frontdesk_client.post(
        _reports_url(patient.id, vid),
        {"file": SimpleUploadedFile("scan.pdf", b"%PDF", content_type="application/pdf"), "name": "CBC"},
        format="multipart",
    )
    assert up.status_code == 201, up.data
    assert up.data[0]["name"] == "CBC"


def test_report_upload_without_file_is_400(doctor_client, patient, reports_dir):
    vid = _add_visit(doctor_client, patient.id).data["id"]

    r = doctor_client.post(_reports_url(patient.id, vid), {"name": "nothing"}, format="multipart")

    assert r.status_code == 400
    assert r.data["error"]["code"] == "validation_error"


def test_visit_listing_embeds_reports(doctor_client, patient, reports_dir):
    vid = _add_visit(doctor_client, patient.id).data["id"]
    doctor_client.post(
        _reports_url(patient.id, vid),
        {"file": SimpleUploadedFile("a.txt", b"hello", content_type="text/plain")},
        format="multipart",
    )

    r = doctor_client.get(f"/api/v1/patients/{patient.id}/")
    reports = r.data["visits"][0]["reports"]
    assert len(reports) == 1
    assert reports[0]["url"].endswith(f"/reports/{reports[0]['id']}/download/")


def test_report_upload_overlong_name_is_400(doctor_client, patient, reports_dir):
    vid = _add_visit(doctor_client, patient.id).data["id"]

    r = doctor_client.post(
        _reports_url(patient.id, vid),
        {"file": SimpleUploadedFile("a.txt", b"hello", content_type="text/plain"), "name": "n" * 400},
        format="multipart",
    )

    assert r.status_code == 400
    assert r.data["error"]["code"] == "validation_error"
    assert "name" in r.data["error"]["details"]


def test_malformed_ids_in_report_urls_are_404_envelopes(doctor_client, patient):
    for url in (
        "/api/v1/patients/not-a-uuid/visits/x/reports/",
        f"/api/v1/patients/{patient.id}/visits/x/reports/",
        f"/api/v1/patients/{patient.id}/visits/x/reports/y/download/",
    ):
        r = doctor_client.get(url)

        assert r.status_code == 404, url
        assert r["Content-Type"].startswith("application/json")
        assert r.data["error"]["code"] == "not_found"


def test_create_overlong_name_is_400(frontdesk_client):
    r = _create_patient(frontdesk_client, name="A" * 256)

    assert r.status_code == 400
    assert r.data["error"]["code"] == "validation_error"
