import pytest

from clinic_core.common.permissions import ROLE_ADMIN, _user_roles
from clinic_core.iam.models import User, UserRole

pytestmark = pytest.mark.django_db


def test_create_user_lowercases_email_and_hashes_password():
    u = User.objects.create_user(email=" Desk@Clinic.TEST ", password="pw123456", name=" Desk ")

    assert u.email == "desk@clinic.test"
    assert u.name == "Desk"
    assert u.role == UserRole.FRONTDESK
    assert u.check_password("pw123456")


def test_create_user_rejects_unknown_role():
    with pytest.raises(ValueError):
        User.objects.create_user(email="x@clinic.test", password="pw", role="NURSE")


def test_superuser_is_admin():
    su = User.objects.create_superuser(email="root@clinic.test", password="pw123456")

    assert su.is_staff and su.is_superuser
    assert su.role == UserRole.ADMIN
    assert _user_roles(su) == {ROLE_ADMIN}
