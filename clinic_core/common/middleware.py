# clinic_core/common/middleware.py
from __future__ import annotations

from clinic_core.common.api.exceptions import ensure_request_id
from clinic_core.common.logging import request_id_var

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIdMiddleware:
    """
    Gives every request a stable request_id (incoming X-Request-ID wins),
    exposes it to log records and echoes it back on the response.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        incoming = request.headers.get(REQUEST_ID_HEADER)
        if incoming:
            request.request_id = incoming[:64]
        rid = ensure_request_id(request)

        token = request_id_var.set(rid)
        try:
            response = self.get_response(request)
        finally:
            request_id_var.reset(token)

        response[REQUEST_ID_HEADER] = rid
        return response
