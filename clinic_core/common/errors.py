# clinic_core/common/errors.py
"""
Domain errors raised by services and selectors.

They are DRF APIExceptions, so they flow through the global exception
handler (clinic_core.common.api.exceptions) into the error envelope;
views never translate them.
"""
from __future__ import annotations

from typing import Any

from rest_framework import status
from rest_framework.exceptions import APIException


class DomainError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request failed."
    default_code = "error"

    def __init__(self, message: str | None = None, *, details: Any = None):
        self.message = message or str(self.default_detail)
        self.details = details
        super().__init__(detail=self.message, code=self.default_code)

    @property
    def code(self) -> str:
        return self.default_code


class ValidationError(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input."
    default_code = "validation_error"


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class ConflictError(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict."
    default_code = "conflict"


class AuthError(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid credentials."
    default_code = "auth_error"


class StorageError(DomainError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Storage failure."
    default_code = "storage_error"
