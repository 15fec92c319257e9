# clinic_core/audit/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import mixins, viewsets

from clinic_core.audit.api.serializers import AuditEventSerializer
from clinic_core.audit.models import AuditEvent, AuditEventCode
from clinic_core.audit.selectors import list_audit_events
from clinic_core.common.permissions import AuditPermission


class AuditEventViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Audit trail, newest first (paginated). ADMIN only.
    """
    permission_classes = [AuditPermission]
    serializer_class = AuditEventSerializer
    queryset = AuditEvent.objects.none()

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return AuditEvent.objects.none()
        return list_audit_events(params=self.request.query_params)

    @extend_schema(
        tags=["Audit"],
        parameters=[
            OpenApiParameter(name="entity_type", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY,
                             required=False, description="Patient, Visit, Report or User."),
            OpenApiParameter(name="entity_id", type=OpenApiTypes.UUID, location=OpenApiParameter.QUERY,
                             required=False),
            OpenApiParameter(name="event_code", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY,
                             required=False, enum=AuditEventCode.values),
            OpenApiParameter(name="actor_user_id", type=OpenApiTypes.UUID, location=OpenApiParameter.QUERY,
                             required=False),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)
