"""Ingestion error taxonomy.

Only ``MalformedEntryError`` is recovered inside a parser (the entry is skipped). The others
fail a whole document; the ingestion coordinator turns them into per-document outcomes.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class IngestionError(Exception):
    code = "INGESTION_ERROR"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class MalformedEntryError(IngestionError):
    code = "MALFORMED_ENTRY"


class ContainerNotFoundError(IngestionError):
    code = "CONTAINER_NOT_FOUND"


class UnrecognizedFormatError(IngestionError):
    code = "UNRECOGNIZED_FORMAT"


class MalformedJSONError(IngestionError):
    code = "MALFORMED_JSON"
