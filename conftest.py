# conftest.py
import pytest
from django.db.backends.base.base import BaseDatabaseWrapper
from rest_framework.test import APIClient

from clinic_core.iam.models import User, UserRole
from clinic_core.patients.services import PatientService
from clinic_core.patients.storage import ReportStorage


@pytest.fixture(autouse=True)
def _keep_test_db_connection_open(monkeypatch):
    """An explicit response.close() fires request_finished, whose
    close_old_connections would close the file-backed test DB connection
    inside the per-test transaction; leave it open while that wraps it."""
    original = BaseDatabaseWrapper.close_if_unusable_or_obsolete

    def close_if_unusable_or_obsolete(self):
        if self.in_atomic_block:
            return
        original(self)

    monkeypatch.setattr(
        BaseDatabaseWrapper, "close_if_unusable_or_obsolete", close_if_unusable_or_obsolete
    )


def _make_user(email, role, name="Test User", password="testpass123"):
    return User.objects.create_user(email=email, password=password, name=name, role=role)


def client_for(user):
    c = APIClient()
    c.force_authenticate(user=user)
    return c


@pytest.fixture
def user(db):
    """Clinic administrator."""
    return _make_user("admin@clinic.test", UserRole.ADMIN, name="Admin")


@pytest.fixture
def doctor(db):
    return _make_user("doctor@clinic.test", UserRole.DOCTOR, name="Dr House")


@pytest.fixture
def frontdesk(db):
    return _make_user("desk@clinic.test", UserRole.FRONTDESK, name="Desk")


@pytest.fixture
def api_client(user):
    return client_for(user)


@pytest.fixture
def doctor_client(doctor):
    return client_for(doctor)


@pytest.fixture
def frontdesk_client(frontdesk):
    return client_for(frontdesk)


@pytest.fixture
def anon_client():
    return APIClient()


@pytest.fixture
def patient(db):
    return PatientService.create_patient(name="Asha Rao", phone="9876543210")


@pytest.fixture
def reports_dir(settings, tmp_path):
    """Point REPORTS_DIR at a per-test directory."""
    path = tmp_path / "reports"
    settings.REPORTS_DIR = path
    return path


@pytest.fixture
def storage(reports_dir):
    return ReportStorage(reports_dir)
