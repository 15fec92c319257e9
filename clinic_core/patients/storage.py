# clinic_core/patients/storage.py
from __future__ import annotations

import re
import time
import uuid
from pathlib import Path

from django.conf import settings
from django.core.files import File
from django.core.files.storage import FileSystemStorage

from clinic_core.common.errors import StorageError

_SAFE_EXT = re.compile(r"[^A-Za-z0-9.]")


class ReportStorage:
    """
    Report binaries on the local filesystem, addressed by stored name.
    The root directory is given explicitly; nothing here reads settings.
    """

    def __init__(self, location: str | Path):
        self.location = Path(location)
        self._fs = FileSystemStorage(location=str(self.location))

    @staticmethod
    def generate_name(original_name: str | None) -> str:
        """
        <epoch-ms>-<uuid4 hex><ext>; the uuid keeps concurrent uploads in the
        same millisecond apart.
        """
        ext = _SAFE_EXT.sub("", Path(original_name or "").suffix)[:16].lower()
        return f"{int(time.time() * 1000)}-{uuid.uuid4().hex}{ext}"

    def save(self, stored_name: str, content) -> str:
        try:
            return self._fs.save(stored_name, content)
        except OSError as exc:
            raise StorageError("Could not store report file.") from exc

    def exists(self, stored_name: str) -> bool:
        return bool(stored_name) and self._fs.exists(stored_name)

    def open(self, stored_name: str) -> File:
        try:
            return self._fs.open(stored_name, "rb")
        except OSError as exc:
            raise StorageError("Could not read report file.") from exc

    def delete(self, stored_name: str) -> None:
        """
        Missing files are ignored; other OS errors propagate.
        """
        self._fs.delete(stored_name)

    def path(self, stored_name: str) -> Path:
        return Path(self._fs.path(stored_name))


def get_report_storage() -> ReportStorage:
    return ReportStorage(settings.REPORTS_DIR)
