from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_FENCE_RE = re.compile(r"```(?:json|javascript|js)?\s*", flags=re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def _load_if_json(s: str) -> Any | None:
    try:
        return json.loads(s)
    except (TypeError, ValueError):
        return None


def extract_bracketed(text: str, opener: str = "[", closer: str = "]") -> str | None:
    """Substring from the first `opener` to the last `closer`, or None."""
    start = text.find(opener)
    end = text.rfind(closer)
    if start == -1 or end == -1 or end < start:
        return None
    return text[start : end + 1]


def _non_empty_list(value: Any) -> bool:
    return isinstance(value, list) and len(value) > 0


def parse_json_array_with_fallback(
    text: str | None,
    fallback: Callable[[], T],
    *,
    accept: Callable[[Any], bool] = _non_empty_list,
) -> tuple[list[Any] | T, bool]:
    """
    Recover a JSON array from model output in three tiers:

    1. strict parse of the whole text;
    2. strip code fences and parse the span between the first `[` and the last `]`;
    3. `fallback()`.

    Returns (value, used_fallback). Never raises on malformed input.
    """
    if text:
        direct = _load_if_json(text.strip())
        if direct is not None and accept(direct):
            return direct, False

        span = extract_bracketed(strip_code_fences(text))
        if span is not None:
            parsed = _load_if_json(span)
            if parsed is not None and accept(parsed):
                return parsed, False

    logger.warning("Could not parse a JSON array from model output; using fallback")
    return fallback(), True
