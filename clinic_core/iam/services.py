# clinic_core/iam/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass

from django.contrib.auth.hashers import make_password
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework_simplejwt.tokens import AccessToken

from clinic_core.audit.models import AuditEventCode
from clinic_core.audit.services import AuditService
from clinic_core.common.errors import AuthError, ConflictError, NotFoundError, ValidationError
from clinic_core.iam.models import User, UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    user: User
    token: str


def issue_token(user: User) -> str:
    """
    Access token bound to (user_id, role). Lifetime comes from SIMPLE_JWT.
    """
    token = AccessToken.for_user(user)
    token["role"] = user.role
    return str(token)


class AuthService:
    @staticmethod
    @transaction.atomic
    def signup(*, name: str, email: str, password: str, role: str) -> AuthResult:
        email = (email or "").strip().lower()
        name = (name or "").strip()

        if not name or not email or not password:
            raise ValidationError("name, email and password are required.")
        if role not in UserRole.values:
            raise ValidationError(f"role must be one of {', '.join(UserRole.values)}.")

        if User.objects.filter(email__iexact=email).exists():
            raise ConflictError("User already exists.")

        try:
            with transaction.atomic():
                user = User.objects.create(
                    name=name,
                    email=email,
                    role=role,
                    password=make_password(password),
                )
        except IntegrityError:
            raise ConflictError("User already exists.")

        AuditService.log(
            event_code=AuditEventCode.USER_SIGNED_UP,
            entity_type="User",
            entity_id=user.id,
            actor_user_id=user.id,
            metadata={"role": role},
        )
        logger.info("user signed up: %s (%s)", user.id, role)
        return AuthResult(user=user, token=issue_token(user))

    @staticmethod
    def login(*, email: str, password: str) -> AuthResult:
        email = (email or "").strip().lower()

        user = User.objects.filter(email__iexact=email, is_active=True).first()
        if user is None:
            raise NotFoundError("User not found.")

        if not user.check_password(password or ""):
            raise AuthError("Invalid credentials.")

        User.objects.filter(id=user.id).update(last_login=timezone.now())
        return AuthResult(user=user, token=issue_token(user))
