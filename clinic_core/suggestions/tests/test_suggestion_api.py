import pytest

from clinic_core.suggestions.models import Suggestion

pytestmark = pytest.mark.django_db


def test_post_then_get(frontdesk_client):
    r = frontdesk_client.post("/api/v1/suggestions/", {"type": "SYMPTOM", "text": "headache"}, format="json")
    assert r.status_code == 200, r.data
    assert r.data["text"] == "HEADACHE"
    assert r.data["count"] == 1

    r = frontdesk_client.get("/api/v1/suggestions/", {"type": "SYMPTOM", "prefix": "he"})
    assert r.status_code == 200
    assert r.data == ["HEADACHE"]


def test_get_unknown_type_is_400(doctor_client):
    r = doctor_client.get("/api/v1/suggestions/", {"type": "NOPE"})

    assert r.status_code == 400
    assert r.data["error"]["code"] == "validation_error"


def test_bulk_endpoint(doctor_client):
    r = doctor_client.post(
        "/api/v1/suggestions/bulk/",
        {"type": "MEDICINE", "items": ["Dolo", "dolo", "Azee"]},
        format="json",
    )

    assert r.status_code == 200, r.data
    assert r.data == {"upserted": 2, "modified": 1, "failed": 0}
    assert Suggestion.objects.get(text="DOLO").count == 2


def test_bulk_rejects_string_items(doctor_client):
    r = doctor_client.post(
        "/api/v1/suggestions/bulk/",
        {"type": "MEDICINE", "items": "Dolo, Azee"},
        format="json",
    )
    assert r.status_code == 400


def test_requires_authentication(anon_client):
    assert anon_client.get("/api/v1/suggestions/", {"type": "SYMPTOM"}).status_code == 401
