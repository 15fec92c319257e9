# clinic_core/common/views.py
from __future__ import annotations

from django.utils import timezone
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView


class HealthView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(tags=["Health"], responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        return Response(
            {"status": "healthy", "service": "clinic-records", "timestamp": timezone.now().isoformat()},
            status=status.HTTP_200_OK,
        )
