# clinic_core/audit/selectors.py
from __future__ import annotations

from typing import Mapping

from django.db.models import QuerySet

from clinic_core.audit.filters import AuditEventFilter
from clinic_core.audit.models import AuditEvent
from clinic_core.common.errors import ValidationError


def list_audit_events(*, params: Mapping[str, str] | None = None) -> QuerySet[AuditEvent]:
    """
    Newest first. params: entity_type, entity_id, event_code, actor_user_id.
    """
    fs = AuditEventFilter(
        data=params or {},
        queryset=AuditEvent.objects.select_related("actor_user"),
    )
    if not fs.is_valid():
        raise ValidationError(
            "Invalid audit filters.",
            details={k: [str(e) for e in v] for k, v in fs.errors.items()},
        )
    return fs.qs.order_by("-occurred_at", "-id")
