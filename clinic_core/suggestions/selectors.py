# clinic_core/suggestions/selectors.py
from __future__ import annotations

from clinic_core.suggestions.models import Suggestion
from clinic_core.suggestions.services import normalize_text, require_type

SUGGESTION_LIMIT = 10


def search_suggestions(*, type: str, prefix: str | None = None, limit: int = SUGGESTION_LIMIT) -> list[str]:
    """
    Texts of `type` starting with `prefix`, most used first, then A-Z.
    istartswith escapes LIKE wildcards, so "%" or "_" in the prefix match literally.
    """
    require_type(type)

    qs = Suggestion.objects.filter(type=type)

    value = normalize_text(prefix)
    if value:
        qs = qs.filter(text__istartswith=value)

    return list(qs.order_by("-count", "text").values_list("text", flat=True)[:limit])
