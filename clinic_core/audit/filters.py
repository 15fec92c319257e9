# clinic_core/audit/filters.py
import django_filters

from clinic_core.audit.models import AuditEvent


class AuditEventFilter(django_filters.FilterSet):
    entity_type = django_filters.CharFilter()
    entity_id = django_filters.UUIDFilter()
    event_code = django_filters.CharFilter()
    actor_user_id = django_filters.UUIDFilter(field_name="actor_user_id")

    class Meta:
        model = AuditEvent
        fields = []
