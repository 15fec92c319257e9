# clinic_core/iam/api/auth.py

from __future__ import annotations

from datetime import timedelta
from typing import Any

from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from clinic_core.iam.api.serializers import (
    AuthResponseSerializer,
    LoginRequestSerializer,
    LogoutResponseSerializer,
    SignupRequestSerializer,
    UserSerializer,
)
from clinic_core.iam.services import AuthResult, AuthService


def _seconds(value: Any) -> int:
    """
    Convert a JWT lifetime setting into seconds.
    Supports timedelta OR int/float (already seconds).
    """
    if isinstance(value, timedelta):
        return int(value.total_seconds())
    try:
        return int(value)
    except (TypeError, ValueError):
        # 0 means "session cookie"
        return 0


def _set_auth_cookie(response: Response, *, access: str) -> None:
    jwt_cfg = getattr(settings, "SIMPLE_JWT", {}) or {}

    response.set_cookie(
        jwt_cfg.get("AUTH_COOKIE", "clinic_access"),
        access,
        max_age=_seconds(jwt_cfg.get("ACCESS_TOKEN_LIFETIME", timedelta(days=7))),
        httponly=bool(jwt_cfg.get("AUTH_COOKIE_HTTP_ONLY", True)),
        secure=bool(jwt_cfg.get("AUTH_COOKIE_SECURE", False)),
        samesite=jwt_cfg.get("AUTH_COOKIE_SAMESITE", "Lax"),
        path="/",
    )


def _auth_response(result: AuthResult, *, detail: str, http_status: int) -> Response:
    res = Response(
        {
            "detail": detail,
            "token": result.token,
            "user": UserSerializer(result.user).data,
        },
        status=http_status,
    )
    _set_auth_cookie(res, access=result.token)
    return res


class SignupView(APIView):
    # a stale or forged auth cookie must not block signing in or out
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        request=SignupRequestSerializer,
        responses={201: AuthResponseSerializer},
        tags=["IAM"],
    )
    def post(self, request):
        ser = SignupRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        result = AuthService.signup(**ser.validated_data)
        return _auth_response(result, detail="signup ok", http_status=status.HTTP_201_CREATED)


class LoginView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        request=LoginRequestSerializer,
        responses={200: AuthResponseSerializer},
        tags=["IAM"],
    )
    def post(self, request):
        ser = LoginRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        result = AuthService.login(**ser.validated_data)
        return _auth_response(result, detail="login ok", http_status=status.HTTP_200_OK)


class LogoutView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        request=None,
        responses={200: LogoutResponseSerializer},
        tags=["IAM"],
    )
    def post(self, request):
        jwt_cfg = getattr(settings, "SIMPLE_JWT", {}) or {}
        res = Response({"detail": "logged out"}, status=status.HTTP_200_OK)
        res.delete_cookie(jwt_cfg.get("AUTH_COOKIE", "clinic_access"), path="/")
        return res
