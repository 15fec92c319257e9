# clinic_core/suggestions/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from django.db import DatabaseError, connection, transaction
from django.utils import timezone

from clinic_core.common.errors import ValidationError
from clinic_core.suggestions.models import Suggestion, SuggestionType

logger = logging.getLogger(__name__)


def normalize_text(text) -> str:
    return str(text if text is not None else "").strip().upper()


def require_type(type_: str) -> str:
    if type_ not in SuggestionType.values:
        raise ValidationError(f"type must be one of {', '.join(SuggestionType.values)}.")
    return type_


def split_terms(text: str | None) -> list[str]:
    """
    "Fever, cough ," -> ["FEVER", "COUGH"]
    """
    return [t for t in (normalize_text(p) for p in (text or "").split(",")) if t]


@dataclass(frozen=True)
class BulkResult:
    upserted: int
    modified: int
    failed: int

    def as_dict(self) -> dict:
        return {"upserted": self.upserted, "modified": self.modified, "failed": self.failed}


def _upsert_sql() -> str:
    qn = connection.ops.quote_name
    table = qn(Suggestion._meta.db_table)
    return (
        f"INSERT INTO {table} ({qn('type')}, {qn('text')}, {qn('count')}, {qn('created_at')}, {qn('updated_at')}) "
        "VALUES (%s, %s, 1, %s, %s) "
        f"ON CONFLICT ({qn('type')}, {qn('text')}) DO UPDATE SET "
        f"{qn('count')} = {table}.{qn('count')} + 1, "
        f"{qn('updated_at')} = EXCLUDED.{qn('updated_at')}"
    )


def _execute_upsert(type_: str, text: str) -> None:
    # One statement: insert with count=1 or bump the existing row's count.
    now = connection.ops.adapt_datetimefield_value(timezone.now())
    with connection.cursor() as cursor:
        cursor.execute(_upsert_sql(), [type_, text, now, now])


class SuggestionService:
    @staticmethod
    def upsert(*, type: str, text) -> Suggestion:
        require_type(type)
        value = normalize_text(text)
        if not value:
            raise ValidationError("text must not be empty.")

        _execute_upsert(type, value)
        return Suggestion.objects.get(type=type, text=value)

    @staticmethod
    def bulk_upsert(*, type: str, items: Iterable) -> BulkResult:
        """
        Unordered batch: every token is upserted in its own savepoint so one
        failing token never aborts the others. Repeated tokens count once each.
        """
        require_type(type)
        if items is None or isinstance(items, (str, bytes)):
            raise ValidationError("items must be a list.")

        tokens = [t for t in (normalize_text(i) for i in items) if t]
        if not tokens:
            return BulkResult(upserted=0, modified=0, failed=0)

        # Reporting only; the increments themselves never read first.
        known = set(
            Suggestion.objects.filter(type=type, text__in=set(tokens)).values_list("text", flat=True)
        )

        upserted = modified = failed = 0
        for token in tokens:
            try:
                with transaction.atomic():
                    _execute_upsert(type, token)
            except DatabaseError:
                logger.warning("suggestion upsert failed for %s:%s", type, token, exc_info=True)
                failed += 1
                continue

            if token in known:
                modified += 1
            else:
                upserted += 1
                known.add(token)

        return BulkResult(upserted=upserted, modified=modified, failed=failed)

    @staticmethod
    def record_visit_terms(*, symptoms: str | None, medicines: Iterable[str] | None) -> None:
        """
        Feed a visit's free text into the index: each comma-separated symptom
        token and each medicine entry counts as one observation.
        """
        symptom_terms = split_terms(symptoms)
        medicine_terms = [t for t in (normalize_text(m) for m in (medicines or [])) if t]

        if symptom_terms:
            SuggestionService.bulk_upsert(type=SuggestionType.SYMPTOM, items=symptom_terms)
        if medicine_terms:
            SuggestionService.bulk_upsert(type=SuggestionType.MEDICINE, items=medicine_terms)
