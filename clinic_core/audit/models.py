# clinic_core/audit/models.py
from django.conf import settings
from django.db import models

from clinic_core.common.models import UUIDModel


class AuditEventCode(models.TextChoices):
    PATIENT_CREATED = "patient.created", "Patient registered"
    VISIT_ADDED = "visit.added", "Visit added"
    REPORT_UPLOADED = "report.uploaded", "Report uploaded"
    REPORT_DELETED = "report.deleted", "Report deleted"
    USER_SIGNED_UP = "user.signed_up", "User signed up"


class AuditEvent(UUIDModel):
    """
    One write against the clinic records. Rows are only ever inserted.
    """
    event_code = models.CharField(max_length=128, db_index=True)
    entity_type = models.CharField(max_length=128, db_index=True)  # Patient, Visit, Report, User
    entity_id = models.UUIDField(db_index=True)

    actor_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="audit_events",
        null=True,
        blank=True,
    )

    occurred_at = models.DateTimeField(auto_now_add=True, db_index=True)
    metadata = models.JSONField(default=dict)

    class Meta:
        db_table = "audit_audit_event"
        indexes = [
            models.Index(fields=["entity_type", "entity_id"], name="audit_entity_idx"),
            models.Index(fields=["event_code", "occurred_at"], name="audit_code_occurred_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.event_code} {self.entity_type}:{self.entity_id}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise RuntimeError("Audit events are immutable.")
        super().save(*args, **kwargs)
