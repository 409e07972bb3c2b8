"""Recover typed suggestions from free-form assessment output."""

import logging
from typing import Any, Optional

from storyfold.llm.parser import parse_json_array

from .models import RefinementSuggestion, Severity, SuggestionType

logger = logging.getLogger(__name__)


def coerce_type(value: Any) -> SuggestionType:
    """Map a raw ``type`` value onto a SuggestionType, defaulting to OTHER."""
    try:
        return SuggestionType(value)
    except ValueError:
        return SuggestionType.OTHER


def coerce_severity(value: Any) -> Optional[Severity]:
    """Map a raw ``severity`` value onto a Severity, or None if unrecognized."""
    if not isinstance(value, str):
        return None
    try:
        return Severity(value)
    except ValueError:
        return None


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _id_text(value: Any) -> str:
    """Render a raw id the way the model wrote it (true, 1 rather than True, 1.0)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_suggestions(raw: Optional[str]) -> list[RefinementSuggestion]:
    """
    Parse model output into a list of suggestions.

    The model is asked for a bare JSON array but may wrap it in prose or
    code fences. Anything that cannot be decoded as an array yields an
    empty list. Elements without a string ``summary`` are dropped; other
    fields are coerced to their allowed values. A missing id becomes the
    element's 1-based position in the decoded array.

    Args:
        raw: Raw LLM output text

    Returns:
        Suggestions in the order the model gave them (possibly empty)
    """
    if not raw:
        return []

    items = parse_json_array(raw, strict=False)
    if items is None:
        return []

    suggestions: list[RefinementSuggestion] = []
    for index, item in enumerate(items, start=1):
        if not isinstance(item, dict) or not isinstance(item.get("summary"), str):
            logger.debug(f"Dropping suggestion without a summary: {str(item)[:100]}")
            continue

        raw_id = item.get("id")
        suggestions.append(
            RefinementSuggestion(
                id=_id_text(raw_id) if raw_id is not None else str(index),
                type=coerce_type(item.get("type")),
                summary=item["summary"],
                detail=_optional_text(item.get("detail")),
                anchor=_optional_text(item.get("anchor")),
                severity=coerce_severity(item.get("severity")),
            )
        )

    return suggestions
