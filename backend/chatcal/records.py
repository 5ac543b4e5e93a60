"""Canonical conversation record shared by every parser and by the API.

Frontend expects (``NormalizedRecord.to_dict()``):
{
  "id": str,
  "platform": "chatgpt" | "claude" | ...,
  "title": str,
  "date": ISO-8601 str,
  "summary": str,
  "content": "role: text\\n\\nrole: text",
  "tags": [str, ...],
  "starred": bool,
  "quality": float,          # 1..5, steps of 0.5
  "relationships": [],
  "userId": str,
  "extractedAt": ISO-8601 str
}
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Tuple

from dateutil import parser as dt_parser

from chatcal.scoring import score_quality
from chatcal.tagging import infer_tags


SUMMARY_LENGTH = 150
TURN_SEPARATOR = "\n\n"


@dataclass(frozen=True)
class NormalizedRecord:
    id: str
    platform: str
    title: str
    date: datetime
    summary: str
    content: str
    tags: Tuple[str, ...]
    starred: bool = False
    quality: float = 3.0
    relationships: Tuple[str, ...] = field(default_factory=tuple)
    user_id: str = ""
    extracted_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "platform": self.platform,
            "title": self.title,
            "date": _iso(self.date),
            "summary": self.summary,
            "content": self.content,
            "tags": list(self.tags),
            "starred": self.starred,
            "quality": self.quality,
            "relationships": list(self.relationships),
            "userId": self.user_id,
            "extractedAt": _iso(self.extracted_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NormalizedRecord":
        """Rebuild a record from ``to_dict()`` output (e.g. a previously exported file)."""
        date = to_datetime(data.get("date")) or now_local()
        return cls(
            id=str(data.get("id") or ""),
            platform=str(data.get("platform") or ""),
            title=str(data.get("title") or ""),
            date=date,
            summary=str(data.get("summary") or ""),
            content=str(data.get("content") or ""),
            tags=tuple(str(t) for t in (data.get("tags") or [])),
            starred=bool(data.get("starred")),
            quality=float(data.get("quality") or 0),
            relationships=tuple(data.get("relationships") or ()),
            user_id=str(data.get("userId") or ""),
            extracted_at=to_datetime(data.get("extractedAt")),
        )


def _iso(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.isoformat()


def now_local() -> datetime:
    return datetime.now().astimezone()


def to_datetime(value: Any, unit: str = "s") -> Optional[datetime]:
    """Coerce a source timestamp into an aware local datetime.

    Numbers (and numeric strings) are epoch values in ``unit`` ("s" or "ms"); other strings
    are parsed as dates. Returns None when the value can't be interpreted so the caller
    can fall back to ingestion time.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return value.astimezone()

    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            value = float(s)
        except ValueError:
            try:
                return dt_parser.parse(s).astimezone()
            except (ValueError, OverflowError):
                return None

    if isinstance(value, (int, float)):
        try:
            v = float(value)
            if not math.isfinite(v):
                return None
            if unit == "ms":
                v = v / 1000.0
            return datetime.fromtimestamp(v).astimezone()
        except (OverflowError, OSError, ValueError):
            return None

    return None


def make_summary(content: str, limit: int = SUMMARY_LENGTH) -> str:
    if len(content) > limit:
        return content[:limit] + "..."
    return content


def format_turn(role: Any, text: Any) -> str:
    return f"{role}: {text}"


def join_turns(turns: Iterable[str]) -> str:
    return TURN_SEPARATOR.join(turns)


def build_record(
    platform: str,
    record_id: str,
    title: str,
    content: str,
    date: Optional[datetime] = None,
    user_id: str = "",
    tag_title: Optional[str] = None,
    starred: bool = False,
    extracted_at: Optional[datetime] = None,
) -> Optional[NormalizedRecord]:
    """Create a fully annotated record, or None when the content is blank.

    ``tag_title`` overrides the title fed to tag inference (some sources only tag on the
    title field they actually carried, not on a synthesized placeholder).
    """
    if not isinstance(content, str) or not content.strip():
        return None

    ts = now_local()
    tags = tuple(infer_tags(content, title if tag_title is None else tag_title))
    return NormalizedRecord(
        id=record_id,
        platform=platform,
        title=title,
        date=date or ts,
        summary=make_summary(content),
        content=content,
        tags=tags,
        starred=starred,
        quality=score_quality(content, tags),
        relationships=(),
        user_id=user_id,
        extracted_at=extracted_at or ts,
    )
