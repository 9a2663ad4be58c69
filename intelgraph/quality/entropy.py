"""Entropy scoring for node text and attribute values.

Scores approximate how much information a value carries, in [0, 1]:

- empty string → 0
- placeholder text ("unknown", "n/a", "????", "xxxx", ...) → 0.05
- a single character → 0.1
- otherwise 60 % normalized Shannon entropy over character frequencies
  plus 40 % a length term that saturates at 127 characters.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from typing import Any, Mapping

PLACEHOLDER_SCORE = 0.05
SINGLE_CHAR_SCORE = 0.1
NUMBER_SCORE = 0.7
BOOLEAN_SCORE = 0.5
UNKNOWN_TYPE_SCORE = 0.3

PLACEHOLDER_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"^new\s*(entity|node|item)$",
        r"^(untitled|unnamed|unknown|none|null|undefined|empty|placeholder)$",
        r"^n/?a$",
        r"^(tbd|todo)$",
        r"^test[\s_-]*\d*$",
        r"^(.)\1{2,}$",          # xxx, aaaa, 1111, ...
        r"^123+$",
        r"^\?+$",
        r"^-+$",
        r"^(新实体|未命名|未知|待填写|待补充)$",
    )
)


def is_placeholder(value: str | None) -> bool:
    """Whether ``value`` looks like filler text rather than real data."""
    if not value:
        return False
    trimmed = value.strip()
    return any(pattern.search(trimmed) for pattern in PLACEHOLDER_PATTERNS)


def string_entropy(value: str | None) -> float:
    """Information score for a piece of text."""
    if not value or not isinstance(value, str):
        return 0.0
    trimmed = value.strip()
    if not trimmed:
        return 0.0
    if is_placeholder(trimmed):
        return PLACEHOLDER_SCORE

    length = len(trimmed)
    if length < 2:
        return SINGLE_CHAR_SCORE

    entropy = 0.0
    for count in Counter(trimmed).values():
        p = count / length
        entropy -= p * math.log2(p)

    max_entropy = math.log2(min(length, 26))
    normalized = entropy / max_entropy if max_entropy > 0 else 0.0
    length_factor = min(1.0, math.log2(length + 1) / 7)

    return min(1.0, normalized * 0.6 + length_factor * 0.4)


def field_entropy(value: Any) -> float:
    """Information score for an attribute value of any supported type."""
    if value is None:
        return 0.0
    if isinstance(value, str):
        return string_entropy(value)
    if isinstance(value, bool):
        return BOOLEAN_SCORE
    if isinstance(value, (int, float)):
        return NUMBER_SCORE if math.isfinite(value) else 0.0
    if isinstance(value, Mapping):
        value = list(value.values())
    if isinstance(value, (list, tuple, set, frozenset)):
        if not value:
            return 0.0
        scores = [field_entropy(item) for item in value]
        return min(1.0, sum(scores) / len(scores))
    return UNKNOWN_TYPE_SCORE
