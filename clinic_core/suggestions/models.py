# clinic_core/suggestions/models.py
from django.db import models

from clinic_core.common.models import TimeStampedModel


class SuggestionType(models.TextChoices):
    SYMPTOM = "SYMPTOM", "Symptom"
    MEDICINE = "MEDICINE", "Medicine"


class Suggestion(TimeStampedModel):
    """
    Usage tally behind symptom/medicine autocomplete.
    One row per (type, text); text is stored trimmed and upper-cased.
    count only ever grows.
    """
    type = models.CharField(max_length=16, choices=SuggestionType.choices)
    text = models.CharField(max_length=255)
    count = models.PositiveIntegerField(default=1)

    class Meta:
        db_table = "suggestions_suggestion"
        constraints = [
            models.UniqueConstraint(fields=["type", "text"], name="uq_suggestion_type_text"),
        ]
        indexes = [
            models.Index(fields=["type", "-count", "text"], name="suggestion_rank_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.type}:{self.text} ({self.count})"
