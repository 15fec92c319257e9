# clinic_core/common/api/serializers.py
from __future__ import annotations

from rest_framework import serializers


class StrictInputSerializer(serializers.Serializer):
    """
    Input contract that rejects keys it does not declare.
    """

    def to_internal_value(self, data):
        if isinstance(data, dict) or hasattr(data, "keys"):
            unknown = sorted(set(data.keys()) - set(self.fields.keys()))
            if unknown:
                raise serializers.ValidationError({k: "Unknown field." for k in unknown})
        return super().to_internal_value(data)


class StringListField(serializers.Field):
    """
    Accepts a list of strings or one comma-separated string.
    Internal value is always a list of trimmed, non-empty strings.
    """

    default_error_messages = {
        "invalid": "Expected a list of strings or a comma-separated string.",
    }

    def to_internal_value(self, data):
        if data is None:
            return []
        if isinstance(data, str):
            items = data.split(",")
        elif isinstance(data, (list, tuple)):
            items = []
            for item in data:
                if item is None:
                    continue
                if not isinstance(item, (str, int, float)):
                    self.fail("invalid")
                items.append(str(item))
        else:
            self.fail("invalid")
        return [s.strip() for s in items if s and s.strip()]

    def to_representation(self, value):
        return list(value or [])
