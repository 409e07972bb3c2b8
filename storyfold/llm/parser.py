"""Structured output parsing for LLM responses."""

import json
import logging
import re
from typing import Any, Optional

logger = logging.getLogger(__name__)


# Greedy: first "[" through last "]"
ARRAY_PATTERN = re.compile(r"\[[\s\S]*\]")


class ParseError(Exception):
    """Error parsing LLM output."""

    def __init__(self, message: str, raw_content: str, errors: Optional[list[Any]] = None):
        super().__init__(message)
        self.raw_content = raw_content
        self.errors = errors or []


def extract_json_array(text: str) -> Optional[str]:
    """
    Extract the candidate JSON array from free-form model output.

    The candidate spans from the first ``[`` to the last ``]`` so that
    chatter before and after the array is ignored. Nested arrays inside
    the objects stay intact.

    Returns:
        The candidate substring, or None if the text has no bracket pair
    """
    match = ARRAY_PATTERN.search(text)
    if match:
        return match.group(0)
    return None


def parse_json_array(text: str, strict: bool = True) -> Optional[list[Any]]:
    """
    Parse a JSON array out of LLM output.

    Args:
        text: Raw LLM output text
        strict: If True, raise ParseError on failure; otherwise return None

    Returns:
        The decoded list

    Raises:
        ParseError: If strict and no JSON array can be decoded
    """
    stripped = (text or "").strip()
    candidate = extract_json_array(stripped) or stripped

    try:
        data = json.loads(candidate)
    except (ValueError, RecursionError) as e:
        # Also oversized integers and runaway nesting
        if strict:
            raise ParseError(
                f"Invalid JSON structure: {e}",
                raw_content=text,
                errors=[str(e)],
            )
        logger.debug(f"Could not decode JSON array: {e}")
        return None

    if not isinstance(data, list):
        if strict:
            raise ParseError(
                f"Expected a JSON array, got {type(data).__name__}",
                raw_content=text,
            )
        logger.debug(f"Decoded JSON is a {type(data).__name__}, not an array")
        return None

    return data
