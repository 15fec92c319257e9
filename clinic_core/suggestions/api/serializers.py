# clinic_core/suggestions/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from clinic_core.common.api.serializers import StrictInputSerializer
from clinic_core.suggestions.models import Suggestion, SuggestionType


class SuggestionUpsertSerializer(StrictInputSerializer):
    type = serializers.ChoiceField(choices=SuggestionType.choices)
    text = serializers.CharField(max_length=255)


class SuggestionBulkSerializer(StrictInputSerializer):
    type = serializers.ChoiceField(choices=SuggestionType.choices)
    items = serializers.ListField(
        child=serializers.CharField(max_length=255, allow_blank=True, allow_null=True),
        allow_empty=True,
    )


class SuggestionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Suggestion
        fields = ["type", "text", "count", "created_at", "updated_at"]
        read_only_fields = fields


class BulkResultSerializer(serializers.Serializer):
    upserted = serializers.IntegerField()
    modified = serializers.IntegerField()
    failed = serializers.IntegerField()
