from rest_framework import serializers

from clinic_core.audit.models import AuditEvent


class AuditEventSerializer(serializers.ModelSerializer):
    actor_user_id = serializers.UUIDField(read_only=True, allow_null=True)
    actor_email = serializers.EmailField(source="actor_user.email", read_only=True, default=None)

    class Meta:
        model = AuditEvent
        fields = [
            "id",
            "occurred_at",
            "event_code",
            "entity_type",
            "entity_id",
            "actor_user_id",
            "actor_email",
            "metadata",
        ]
        read_only_fields = fields
