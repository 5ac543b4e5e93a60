"""Platform export parsers - turn loosely structured export JSON into NormalizedRecords.

Exports come in several structural variants (top-level key vs bare array vs ``data.*``
wrapper, turn mapping vs flat message list, ...). Each parser describes its variants as
ordered tuples of ``ShapeRule``s; the first rule whose predicate matches does the
extraction. Nothing is probed by catching exceptions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from chatcal.errors import ContainerNotFoundError, MalformedEntryError
from chatcal.records import NormalizedRecord, build_record, format_turn, join_turns, now_local, to_datetime


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShapeRule:
    """A named predicate-then-extractor pair."""

    name: str
    matches: Callable[[Any], bool]
    extract: Callable[[Any], Any]


def resolve(rules: Sequence[ShapeRule], obj: Any) -> Tuple[Optional[str], Any]:
    for rule in rules:
        if rule.matches(obj):
            return rule.name, rule.extract(obj)
    return None, None


def get_path(obj: Any, *path: str) -> Any:
    cur = obj
    for key in path:
        if not isinstance(cur, dict):
            return None
        cur = cur.get(key)
    return cur


def first_present(obj: Any, aliases: Iterable[str]) -> Any:
    """Value of the first alias that is present and not None."""
    if not isinstance(obj, dict):
        return None
    for alias in aliases:
        value = obj.get(alias)
        if value is not None:
            return value
    return None


def coerce_text(value: Any) -> Optional[str]:
    """None -> None, list -> items joined with a space, str -> itself, else str(value)."""
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(coerce_text(v) or "" for v in value if v is not None)
    if isinstance(value, str):
        return value
    return str(value)


def _is_container(value: Any) -> bool:
    return isinstance(value, (list, dict))


def _container_rule(*path: str) -> ShapeRule:
    return ShapeRule(
        name=".".join(path),
        matches=lambda doc: _is_container(get_path(doc, *path)),
        extract=lambda doc: get_path(doc, *path),
    )


BARE_ARRAY = ShapeRule(name="<array>", matches=lambda doc: isinstance(doc, list), extract=lambda doc: doc)


def flat_turn(msg: Any) -> str:
    """Format one ``{role|author.role, content|message}`` turn object."""
    if not isinstance(msg, dict):
        raise MalformedEntryError(f"turn is not an object (got {type(msg).__name__})")
    role = msg.get("role") or get_path(msg, "author", "role") or "unknown"
    text = coerce_text(first_present(msg, ("content", "message"))) or ""
    return format_turn(role, text)


def flat_turns(messages: List[Any]) -> List[str]:
    return [flat_turn(m) for m in messages]


def blob_turn(blob: Any) -> List[str]:
    return [coerce_text(blob) or ""]


def mapping_turns(mapping: Dict[str, Any]) -> List[str]:
    """ChatGPT ``mapping``: keep nodes whose message carries ``content.parts``."""
    turns: List[str] = []
    for node in mapping.values():
        message = get_path(node, "message")
        parts = get_path(message, "content", "parts")
        if parts is None:
            continue
        role = get_path(message, "author", "role") or "unknown"
        turns.append(format_turn(role, coerce_text(parts)))
    return turns


def _has_list(key: str) -> Callable[[Any], bool]:
    return lambda entry: isinstance(entry.get(key), list)


def _has_value(key: str) -> Callable[[Any], bool]:
    return lambda entry: entry.get(key) is not None


def _has_text(key: str) -> Callable[[Any], bool]:
    return lambda entry: entry.get(key) not in (None, "")


@dataclass
class ParseReport:
    records: List[NormalizedRecord] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    container: Optional[str] = None


class PlatformParser:
    """Base export parser; subclasses only declare their format contract."""

    platform = ""
    label = ""
    user_id = ""

    container_rules: Tuple[ShapeRule, ...] = ()
    turn_rules: Tuple[ShapeRule, ...] = ()

    title_aliases: Tuple[str, ...] = ("title",)
    time_aliases: Tuple[str, ...] = ()
    time_unit = "s"
    id_aliases: Tuple[str, ...] = ()
    id_prefix = ""

    # Classification hints used by the ingestion coordinator.
    filename_hints: Tuple[str, ...] = ()
    top_level_fields: Tuple[str, ...] = ()
    nested_fields: Tuple[str, ...] = ()

    def parse(self, document: Any) -> List[NormalizedRecord]:
        return self.parse_document(document).records

    def parse_document(self, document: Any) -> ParseReport:
        rule_name, container = resolve(self.container_rules, document)
        if rule_name is None:
            raise ContainerNotFoundError(
                f"{self.label} parsing failed: no {self.container_noun()} found in the JSON structure",
                context={"platform": self.platform},
            )

        entries = self._entries(container)
        logger.info("Found %d %s entries (container: %s)", len(entries), self.label, rule_name)

        report = ParseReport(container=rule_name)
        for index, (key, entry) in enumerate(entries):
            try:
                record = self.parse_entry(key, entry, index)
            except MalformedEntryError as e:
                logger.warning("Skipping %s entry %s: %s", self.label, key if key is not None else index, e.message)
                report.skipped.append(f"entry {index}: {e.message}")
                continue
            except Exception as e:
                logger.warning("Error parsing %s entry %s: %s", self.label, key if key is not None else index, e)
                report.skipped.append(f"entry {index}: {e}")
                continue
            if record is not None:
                report.records.append(record)

        logger.info("Successfully parsed %d %s conversations", len(report.records), self.label)
        return report

    def container_noun(self) -> str:
        return "conversations data"

    def _entries(self, container: Any) -> List[Tuple[Optional[str], Any]]:
        if isinstance(container, dict):
            return [(str(k), v) for k, v in container.items()]
        return [(None, v) for v in container]

    def parse_entry(self, key: Optional[str], entry: Any, index: int) -> Optional[NormalizedRecord]:
        if not isinstance(entry, dict):
            raise MalformedEntryError(f"entry is not an object (got {type(entry).__name__})")

        _, turns = resolve(self.turn_rules, entry)
        content = join_turns(turns or [])
        if not content.strip():
            # Empty conversations are dropped, not reported.
            return None

        title = self.resolve_title(entry, index)
        return build_record(
            platform=self.platform,
            record_id=self.resolve_id(key, entry, index),
            title=title,
            content=content,
            date=self.resolve_date(entry),
            user_id=self.user_id,
            tag_title=self.tag_title(entry, title),
        )

    def resolve_title(self, entry: Dict[str, Any], index: int) -> str:
        title = coerce_text(first_present(entry, self.title_aliases))
        if title and title.strip():
            return title
        return f"{self.label} Conversation {index + 1}"

    def tag_title(self, entry: Dict[str, Any], title: str) -> str:
        return title

    def resolve_date(self, entry: Dict[str, Any]):
        return to_datetime(first_present(entry, self.time_aliases), unit=self.time_unit) or now_local()

    def resolve_id(self, key: Optional[str], entry: Dict[str, Any], index: int) -> str:
        if key is not None:
            return key
        source_id = coerce_text(first_present(entry, self.id_aliases))
        if source_id and source_id.strip():
            return source_id
        return f"{self.id_prefix}_{index}"


class ChatGPTParser(PlatformParser):
    platform = "chatgpt"
    label = "ChatGPT"
    user_id = "user-chatgpt"

    container_rules = (
        _container_rule("conversations"),
        BARE_ARRAY,
        _container_rule("data", "conversations"),
    )
    turn_rules = (
        ShapeRule("mapping", lambda e: isinstance(e.get("mapping"), dict), lambda e: mapping_turns(e["mapping"])),
        ShapeRule("messages", _has_list("messages"), lambda e: flat_turns(e["messages"])),
        ShapeRule("conversation", _has_value("conversation"), lambda e: blob_turn(e["conversation"])),
    )

    title_aliases = ("title",)
    time_aliases = ("create_time", "created_at")
    time_unit = "s"
    id_aliases = ("id", "conversation_id")
    id_prefix = "conv"

    filename_hints = ("chatgpt",)
    top_level_fields = ("conversations",)
    nested_fields = ("conversations",)


class DeepSeekParser(PlatformParser):
    platform = "deepseek"
    label = "DeepSeek"
    user_id = "user-deepseek"

    container_rules = (
        _container_rule("chat_list"),
        _container_rule("chats"),
        BARE_ARRAY,
        _container_rule("data", "chat_list"),
    )
    # Turn arrays win over blobs; an empty ``messages`` string falls through to ``conversation``.
    turn_rules = (
        ShapeRule("messages", _has_list("messages"), lambda e: flat_turns(e["messages"])),
        ShapeRule("conversation", _has_list("conversation"), lambda e: flat_turns(e["conversation"])),
        ShapeRule("messages_blob", _has_text("messages"), lambda e: blob_turn(e["messages"])),
        ShapeRule("conversation_blob", _has_value("conversation"), lambda e: blob_turn(e["conversation"])),
    )

    title_aliases = ("title", "name")
    # Numbers are JS-style millisecond timestamps; strings are ISO dates.
    time_aliases = ("created_at", "timestamp")
    time_unit = "ms"
    id_aliases = ("chat_id", "id")
    id_prefix = "deepseek"

    filename_hints = ("deepseek",)
    top_level_fields = ("chat_list", "chats")
    nested_fields = ("chat_list",)

    def container_noun(self) -> str:
        return "chat list"

    def _entries(self, container: Any) -> List[Tuple[Optional[str], Any]]:
        # Chat lists are arrays; ids come from the chat itself, never from a mapping key.
        values = container.values() if isinstance(container, dict) else container
        return [(None, v) for v in values]

    def tag_title(self, entry: Dict[str, Any], title: str) -> str:
        return coerce_text(entry.get("title")) or ""


PARSERS: Dict[str, PlatformParser] = {
    "chatgpt": ChatGPTParser(),
    "deepseek": DeepSeekParser(),
}


def get_parser(platform: str) -> Optional[PlatformParser]:
    return PARSERS.get(platform)
