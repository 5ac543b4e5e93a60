"""Ingestion coordinator - classify uploaded exports, parse them, merge the results.

Documents are handled strictly one after another (read, decode, parse) so outcomes come
back in upload order. A failing document never stops the batch.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from chatcal.errors import IngestionError, MalformedJSONError, UnrecognizedFormatError
from chatcal.parser import PARSERS, get_parser, get_path
from chatcal.records import NormalizedRecord


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawDocument:
    """One uploaded export. ``payload`` is text, bytes, or a readable binary stream."""

    name: str
    payload: Any

    def read_text(self) -> str:
        data = self.payload
        if hasattr(data, "read"):
            data = data.read()
        if isinstance(data, str):
            return data
        if isinstance(data, (bytes, bytearray)):
            try:
                return bytes(data).decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise MalformedJSONError(f"file is not UTF-8 text: {e}")
        raise MalformedJSONError(f"unsupported payload type: {type(data).__name__}")


@dataclass
class DocumentOutcome:
    name: str
    ok: bool
    message: str
    platform: Optional[str] = None
    count: int = 0
    error_code: Optional[str] = None
    skipped: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "ok": self.ok,
            "message": self.message,
            "platform": self.platform,
            "count": self.count,
            "errorCode": self.error_code,
            "skipped": list(self.skipped),
        }


@dataclass
class IngestResult:
    collection: Tuple[NormalizedRecord, ...]
    outcomes: List[DocumentOutcome]

    @property
    def total_imported(self) -> int:
        return sum(o.count for o in self.outcomes if o.ok)

    @property
    def failed(self) -> List[DocumentOutcome]:
        return [o for o in self.outcomes if not o.ok]

    def summary_message(self) -> str:
        n_files = len(self.outcomes)
        if self.total_imported > 0:
            return f"Successfully imported {self.total_imported} conversations from {n_files} file(s)"
        return f"No conversations imported from {n_files} file(s)"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "outcomes": [o.to_dict() for o in self.outcomes],
            "totalImported": self.total_imported,
            "message": self.summary_message(),
        }


def expected_formats_message() -> str:
    labels = [p.label for p in PARSERS.values()]
    if len(labels) > 1:
        joined = ", ".join(labels[:-1]) + " or " + labels[-1]
    else:
        joined = "".join(labels)
    return f"Unrecognized file format. Expected {joined} JSON export."


def load_document(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedJSONError(f"Invalid JSON: {e}")


def classify(document: Any, filename: str = "") -> Optional[str]:
    """Pick a platform in registry order.

    Each platform is tried as a whole (filename hint, top-level field, ``data.<field>``)
    before the next one is considered.
    """
    name = (filename or "").lower()
    for platform, p in PARSERS.items():
        if any(hint in name for hint in p.filename_hints):
            return platform
        if not isinstance(document, dict):
            continue
        if any(document.get(f) is not None for f in p.top_level_fields):
            return platform
        if any(get_path(document, "data", f) is not None for f in p.nested_fields):
            return platform

    return None


def ingest_document(doc: RawDocument) -> Tuple[List[NormalizedRecord], DocumentOutcome]:
    platform: Optional[str] = None
    try:
        document = load_document(doc.read_text())
        platform = classify(document, doc.name)
        parser = get_parser(platform) if platform else None
        if parser is None:
            raise UnrecognizedFormatError(expected_formats_message())

        report = parser.parse_document(document)
    except IngestionError as e:
        logger.warning("Error loading %s: %s", doc.name, e)
        return [], DocumentOutcome(
            name=doc.name,
            ok=False,
            message=f"Error loading {doc.name}: {e.message}",
            platform=platform,
            error_code=e.code,
        )
    except Exception as e:
        logger.exception("Unexpected error loading %s", doc.name)
        return [], DocumentOutcome(
            name=doc.name,
            ok=False,
            message=f"Error loading {doc.name}: {e}",
            platform=platform,
            error_code=IngestionError.code,
        )

    outcome = DocumentOutcome(
        name=doc.name,
        ok=True,
        message=f"Loaded {len(report.records)} {parser.label} conversations from {doc.name}",
        platform=platform,
        count=len(report.records),
        skipped=report.skipped,
    )
    logger.info(outcome.message)
    return report.records, outcome


def ingest(
    collection: Sequence[NormalizedRecord],
    documents: Iterable[Union[RawDocument, Tuple[str, Any]]],
) -> IngestResult:
    """Parse ``documents`` in order and append their records after ``collection``.

    The input collection is neither mutated nor deduplicated: importing the same export
    twice yields two copies of each record.
    """
    new_records: List[NormalizedRecord] = []
    outcomes: List[DocumentOutcome] = []

    for doc in documents:
        if not isinstance(doc, RawDocument):
            doc = RawDocument(*doc)
        records, outcome = ingest_document(doc)
        new_records.extend(records)
        outcomes.append(outcome)

    return IngestResult(collection=tuple(collection) + tuple(new_records), outcomes=outcomes)
