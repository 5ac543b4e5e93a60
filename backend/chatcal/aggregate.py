"""Pure views over the record collection: filtering, calendar buckets, analytics, export.

Nothing here holds state. The API layer passes the current snapshot plus the filter
values from the request every time.
"""

from __future__ import annotations

import calendar
import json
import math
from collections import OrderedDict
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from chatcal.platforms import CURRENT_SESSION_ID, HOME_PLATFORM, platform_keys
from chatcal.records import NormalizedRecord


def scope_records(collection: Sequence[NormalizedRecord], cross_platform: bool) -> List[NormalizedRecord]:
    """Cross-platform off: only the current session and home-platform records."""
    if cross_platform:
        return list(collection)
    return [r for r in collection if r.id == CURRENT_SESSION_ID or r.platform == HOME_PLATFORM]


def matches(record: NormalizedRecord, term: str, platforms: Iterable[str]) -> bool:
    needle = (term or "").lower()
    if needle:
        hit = (
            needle in record.title.lower()
            or needle in record.content.lower()
            or any(needle in tag.lower() for tag in record.tags)
        )
        if not hit:
            return False
    return record.platform in platforms


def filter_records(
    collection: Sequence[NormalizedRecord],
    term: str = "",
    platforms: Optional[Iterable[str]] = None,
    cross_platform: bool = True,
) -> List[NormalizedRecord]:
    selected = set(platform_keys() if platforms is None else platforms)
    return [r for r in scope_records(collection, cross_platform) if matches(r, term, selected)]


def day_key(value: Any) -> str:
    """Local calendar day (YYYY-MM-DD) of a datetime; time of day is discarded."""
    return value.astimezone().date().isoformat()


def group_by_day(records: Iterable[NormalizedRecord]) -> Dict[str, List[NormalizedRecord]]:
    buckets: Dict[str, List[NormalizedRecord]] = OrderedDict()
    for r in records:
        buckets.setdefault(day_key(r.date), []).append(r)
    return buckets


def month_grid(year: int, month: int) -> List[Optional[date]]:
    """Cells of a Sunday-first month view; None pads the days before the 1st."""
    first_weekday, days_in_month = calendar.monthrange(year, month)
    leading = (first_weekday + 1) % 7
    cells: List[Optional[date]] = [None] * leading
    cells.extend(date(year, month, d) for d in range(1, days_in_month + 1))
    return cells


@dataclass
class Analytics:
    platform_counts: Dict[str, int] = field(default_factory=dict)
    tag_counts: Dict[str, int] = field(default_factory=dict)
    average_quality: float = 0.0
    total: int = 0
    starred: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "platformCounts": dict(self.platform_counts),
            "tagCounts": dict(self.tag_counts),
            "averageQuality": self.average_quality,
            "totalConversations": self.total,
            "starredCount": self.starred,
        }


def _round_one_decimal(value: float) -> float:
    return math.floor(value * 10 + 0.5) / 10


def compute_analytics(records: Sequence[NormalizedRecord]) -> Analytics:
    out = Analytics()
    total_quality = 0.0
    for r in records:
        out.platform_counts[r.platform] = out.platform_counts.get(r.platform, 0) + 1
        total_quality += r.quality
        for tag in r.tags:
            out.tag_counts[tag] = out.tag_counts.get(tag, 0) + 1
        if r.starred:
            out.starred += 1

    out.total = len(records)
    out.average_quality = _round_one_decimal(total_quality / out.total) if out.total else 0.0
    return out


def platform_counts(collection: Iterable[NormalizedRecord]) -> Dict[str, int]:
    """Unfiltered count per known platform (zero included), for the filter bar."""
    counts = {k: 0 for k in platform_keys()}
    for r in collection:
        counts[r.platform] = counts.get(r.platform, 0) + 1
    return counts


def toggle_star(collection: Sequence[NormalizedRecord], record_id: str) -> Tuple[NormalizedRecord, ...]:
    # Every record carrying the id flips; ids are not guaranteed unique across imports.
    return tuple(replace(r, starred=not r.starred) if r.id == record_id else r for r in collection)


def export_records(records: Iterable[NormalizedRecord]) -> str:
    return json.dumps([r.to_dict() for r in records], ensure_ascii=False, indent=2)


def export_filename(fmt: str) -> str:
    return f"ai-conversations-{fmt or 'json'}.json"
