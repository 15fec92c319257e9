# config/settings/test.py
import tempfile
from pathlib import Path

from .base import *  # noqa

DEBUG = False

# file-backed so tests can open a second connection from another thread;
# IMMEDIATE makes concurrent writers queue on the lock instead of failing
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": str(Path(tempfile.gettempdir()) / "clinic-test.sqlite3"),
        "OPTIONS": {"transaction_mode": "IMMEDIATE", "timeout": 20},
        "TEST": {"NAME": str(Path(tempfile.gettempdir()) / "clinic-test-db.sqlite3")},
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

REPORTS_DIR = Path(tempfile.gettempdir()) / "clinic-test-reports"

# route app records through the root logger so pytest caplog sees them
LOGGING["loggers"]["clinic_core"].update({"level": "WARNING", "handlers": [], "propagate": True})
