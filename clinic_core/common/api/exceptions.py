# clinic_core/common/api/exceptions.py
from __future__ import annotations

import logging
import uuid
from typing import Any

from django.http import Http404
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from clinic_core.common.errors import DomainError, StorageError

logger = logging.getLogger(__name__)

# checked in order; first isinstance match wins
_DRF_CODES = (
    (drf_exceptions.ValidationError, "validation_error"),
    (drf_exceptions.NotAuthenticated, "not_authenticated"),
    (drf_exceptions.AuthenticationFailed, "auth_error"),
    (drf_exceptions.PermissionDenied, "permission_denied"),
    (drf_exceptions.NotFound, "not_found"),
    (Http404, "not_found"),
)


def ensure_request_id(request) -> str:
    """
    Return request.request_id, assigning a fresh one if missing.
    Works for both HttpRequest and DRF Request.
    """
    rid = getattr(request, "request_id", None) if request is not None else None
    if not rid:
        rid = uuid.uuid4().hex
        if request is not None:
            setattr(request, "request_id", rid)
    return rid


def build_error_envelope(*, request=None, code: str, message: str, details: Any = None) -> dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details,
            "request_id": ensure_request_id(request),
        }
    }


def _code_for(exc: Exception) -> str:
    for exc_type, code in _DRF_CODES:
        if isinstance(exc, exc_type):
            return code
    if isinstance(exc, drf_exceptions.APIException):
        return exc.default_code or "api_error"
    return "error"


def _split_detail(data: Any) -> tuple[str, Any]:
    """
    DRF payload -> (message, details).
    {"detail": m} gives (m, None); {"detail": m, **rest} gives (m, rest);
    field errors give ("Request failed.", data).
    """
    if isinstance(data, dict) and "detail" in data:
        rest = {k: v for k, v in data.items() if k != "detail"}
        return str(data["detail"]), (rest or None)
    return "Request failed.", data


def api_exception_handler(exc: Exception, context: dict[str, Any]):
    request = context.get("request")

    if isinstance(exc, DomainError):
        if isinstance(exc, StorageError):
            logger.error("storage failure: %s", exc.message, exc_info=exc)
        body = build_error_envelope(request=request, code=exc.code, message=exc.message, details=exc.details)
        return Response(body, status=exc.status_code)

    response = drf_exception_handler(exc, context)

    if response is None:
        logger.exception("unhandled error", exc_info=exc)
        body = build_error_envelope(request=request, code="server_error", message="Unexpected server error.")
        return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    message, details = _split_detail(response.data)
    body = build_error_envelope(request=request, code=_code_for(exc), message=message, details=details)
    # keep WWW-Authenticate / Retry-After set by DRF
    return Response(body, status=response.status_code, headers=dict(response.items()))
