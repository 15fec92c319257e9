import pytest
from rest_framework_simplejwt.tokens import AccessToken

from clinic_core.audit.models import AuditEvent
from clinic_core.common.errors import AuthError, ConflictError, NotFoundError, ValidationError
from clinic_core.iam.models import User, UserRole
from clinic_core.iam.services import AuthService

pytestmark = pytest.mark.django_db


def test_signup_stores_hash_and_lowercased_email():
    result = AuthService.signup(
        name="  Meera  ", email="Meera@Clinic.TEST", password="s3cret!", role=UserRole.DOCTOR
    )

    user = User.objects.get(id=result.user.id)
    assert user.email == "meera@clinic.test"
    assert user.name == "Meera"
    assert user.role == UserRole.DOCTOR
    assert user.password != "s3cret!"
    assert user.check_password("s3cret!")


def test_signup_token_carries_user_id_and_role():
    result = AuthService.signup(name="A", email="a@clinic.test", password="pw1234", role=UserRole.FRONTDESK)

    token = AccessToken(result.token)
    assert token["user_id"] == str(result.user.id)
    assert token["role"] == "FRONTDESK"


def test_signup_token_lifetime_is_seven_days():
    result = AuthService.signup(name="A", email="a@clinic.test", password="pw1234", role=UserRole.ADMIN)

    token = AccessToken(result.token)
    assert token["exp"] - token["iat"] == 7 * 24 * 3600


def test_signup_duplicate_email_is_case_insensitive():
    AuthService.signup(name="A", email="dup@clinic.test", password="pw1234", role=UserRole.ADMIN)

    with pytest.raises(ConflictError):
        AuthService.signup(name="B", email="DUP@clinic.test", password="pw5678", role=UserRole.DOCTOR)

    assert User.objects.filter(email__iexact="dup@clinic.test").count() == 1


def test_signup_rejects_unknown_role():
    with pytest.raises(ValidationError):
        AuthService.signup(name="A", email="a@clinic.test", password="pw1234", role="NURSE")


def test_signup_writes_audit_event():
    result = AuthService.signup(name="A", email="a@clinic.test", password="pw1234", role=UserRole.ADMIN)

    ev = AuditEvent.objects.get(event_code="user.signed_up")
    assert ev.entity_id == result.user.id
    assert ev.metadata == {"role": "ADMIN"}


def test_login_unknown_email_is_not_found():
    with pytest.raises(NotFoundError):
        AuthService.login(email="nobody@clinic.test", password="whatever")


def test_login_wrong_password_is_auth_error(doctor):
    with pytest.raises(AuthError):
        AuthService.login(email="doctor@clinic.test", password="wrong")


def test_login_accepts_mixed_case_email(doctor):
    result = AuthService.login(email="Doctor@Clinic.Test", password="testpass123")

    assert result.user.id == doctor.id
    assert AccessToken(result.token)["role"] == "DOCTOR"

    doctor.refresh_from_db()
    assert doctor.last_login is not None
