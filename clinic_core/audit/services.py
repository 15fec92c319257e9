# clinic_core/audit/services.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from django.db import transaction

from clinic_core.audit.models import AuditEvent

logger = logging.getLogger(__name__)


def _jsonable(metadata: Dict[str, Any]) -> Dict[str, Any]:
    return {k: str(v) if isinstance(v, UUID) else v for k, v in metadata.items()}


class AuditService:
    """
    Call inside the write's own transaction so the event commits or rolls
    back together with it.
    """

    @staticmethod
    @transaction.atomic
    def log(
        *,
        event_code: str,
        entity_type: str,
        entity_id: UUID,
        actor_user_id: UUID | None = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> AuditEvent:
        event = AuditEvent.objects.create(
            event_code=str(event_code),
            entity_type=entity_type,
            entity_id=entity_id,
            actor_user_id=actor_user_id,
            metadata=_jsonable(metadata or {}),
        )
        logger.debug("audit %s %s:%s", event.event_code, entity_type, entity_id)
        return event
