"""Heuristic quality score (1..5 in half steps)."""

from __future__ import annotations

import math
from typing import Any, Sequence


BASE_SCORE = 3.0
MIN_SCORE = 1.0
MAX_SCORE = 5.0

LONG_CONTENT = 2000
SHORT_CONTENT = 100
MANY_TAGS = 2
MANY_LINES = 10


def _round_half(value: float) -> float:
    # Half-up like JS Math.round; Python's round() would bank 2.5 -> 2.
    return math.floor(value * 2 + 0.5) / 2


def score_quality(content: str, tags: Sequence[str]) -> float:
    content = content or ""
    score = BASE_SCORE

    # The two length rules are independent; don't turn them into an if/elif.
    if len(content) > LONG_CONTENT:
        score += 1
    if len(content) < SHORT_CONTENT:
        score -= 1

    if "```" in content or "code" in content:
        score += 0.5
    if len(tags or ()) > MANY_TAGS:
        score += 0.3
    if len(content.split("\n")) > MANY_LINES:
        score += 0.2

    clamped = min(MAX_SCORE, max(MIN_SCORE, score))
    return _round_half(clamped)


def score_record(record: Any) -> float:
    """Score anything exposing ``content`` and ``tags`` (records or plain dicts)."""
    if isinstance(record, dict):
        return score_quality(record.get("content") or "", record.get("tags") or ())
    return score_quality(record.content, record.tags)
