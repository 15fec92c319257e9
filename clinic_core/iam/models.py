# clinic_core/iam/models.py
import uuid

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models


class UserRole(models.TextChoices):
    ADMIN = "ADMIN", "Admin"
    DOCTOR = "DOCTOR", "Doctor"
    FRONTDESK = "FRONTDESK", "Frontdesk"


class UserManager(BaseUserManager):
    use_in_migrations = True

    def normalize_email(self, email):
        return (email or "").strip().lower()

    def create_user(self, email, password=None, *, name="", role=UserRole.FRONTDESK, **extra):
        if not email:
            raise ValueError("email is required")
        if role not in UserRole.values:
            raise ValueError(f"role must be one of {', '.join(UserRole.values)}")

        user = self.model(email=self.normalize_email(email), name=(name or "").strip(), role=role, **extra)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra):
        extra.setdefault("is_staff", True)
        extra.setdefault("is_superuser", True)
        extra.setdefault("name", "Administrator")
        return self.create_user(email, password, role=UserRole.ADMIN, **extra)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Staff account. Email is the login identifier; role drives API permissions
    and is fixed at creation.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=16, choices=UserRole.choices)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    class Meta:
        db_table = "iam_user"
        indexes = [
            models.Index(fields=["role"], name="iam_user_role_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.email} ({self.role})"

    def save(self, *args, **kwargs):
        self.email = (self.email or "").strip().lower()
        super().save(*args, **kwargs)
