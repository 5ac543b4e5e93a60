"""In-memory record collection for the running backend.

The collection is an immutable tuple that is swapped wholesale under a lock; readers take a
snapshot and never see a half-applied import.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable, Optional, Tuple

from chatcal import aggregate
from chatcal.ingest import IngestResult, RawDocument, ingest
from chatcal.records import NormalizedRecord
from chatcal.samples import sample_records


logger = logging.getLogger(__name__)


class RecordStore:
    """Session-lifetime record collection (no persistence)."""

    def __init__(self):
        self._lock = threading.Lock()
        self._records: Tuple[NormalizedRecord, ...] = ()

    def snapshot(self) -> Tuple[NormalizedRecord, ...]:
        with self._lock:
            return self._records

    def replace(self, records: Iterable[NormalizedRecord]) -> None:
        with self._lock:
            self._records = tuple(records)

    def reset(self, seed_samples: bool = True, seed: Optional[int] = None) -> int:
        records = sample_records(seed=seed) if seed_samples else []
        self.replace(records)
        logger.info("Record store reset (%d records)", len(records))
        return len(records)

    def get(self, record_id: str) -> Optional[NormalizedRecord]:
        for r in self.snapshot():
            if r.id == record_id:
                return r
        return None

    def ingest(self, documents: Iterable[RawDocument]) -> IngestResult:
        # Parse outside the lock, then append to whatever is current at merge time.
        result = ingest((), documents)
        new_records = result.collection
        with self._lock:
            merged = self._records + new_records
            self._records = merged
        result.collection = merged
        if result.total_imported:
            logger.info(result.summary_message())
        return result

    def toggle_star(self, record_id: str) -> Optional[NormalizedRecord]:
        with self._lock:
            if not any(r.id == record_id for r in self._records):
                return None
            self._records = aggregate.toggle_star(self._records, record_id)
            records = self._records
        for r in records:
            if r.id == record_id:
                return r
        return None


store = RecordStore()
