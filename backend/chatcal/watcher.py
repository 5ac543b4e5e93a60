"""导入目录监听 - 自动导入放入 IMPORT_WATCH_DIR 的 JSON 导出文件"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Dict, Optional

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from chatcal.ingest import RawDocument


logger = logging.getLogger(__name__)


class ImportFolderHandler(FileSystemEventHandler):
    """Ingest each new/changed ``*.json`` file once per mtime."""

    def __init__(self, store):
        self.store = store
        self.settle_delay = 0.5  # give writers a moment to finish the file
        self._last_mtime_by_path: Dict[str, float] = {}

    def on_any_event(self, event):
        if event.is_directory or not str(event.src_path).lower().endswith('.json'):
            return
        if getattr(event, "event_type", None) not in {"created", "modified"}:
            return

        path = Path(event.src_path)
        try:
            mtime = float(path.stat().st_mtime)
        except OSError:
            return

        prev = self._last_mtime_by_path.get(str(path))
        if prev is not None and abs(prev - mtime) < 1e-6:
            return
        self._last_mtime_by_path[str(path)] = mtime

        self.import_file(path)

    def import_file(self, path: Path):
        if self.settle_delay:
            time.sleep(self.settle_delay)
        try:
            payload = path.read_bytes()
        except OSError as e:
            logger.warning("Could not read %s: %s", path, e)
            return None

        result = self.store.ingest([RawDocument(path.name, payload)])
        for outcome in result.outcomes:
            if outcome.ok:
                logger.info("Auto-import: %s", outcome.message)
            else:
                logger.warning("Auto-import: %s", outcome.message)
        return result


class ImportFolderWatcher:
    def __init__(self, folder: Path, store):
        self.folder = Path(folder)
        self.store = store
        self._observer: Optional[Observer] = None

    def start(self) -> bool:
        if not self.folder.exists() or not self.folder.is_dir():
            logger.warning("Import folder does not exist, watcher disabled: %s", self.folder)
            return False
        try:
            self._observer = Observer()
            self._observer.schedule(ImportFolderHandler(self.store), str(self.folder), recursive=False)
            self._observer.start()
        except Exception as e:
            logger.warning("Failed to start import folder watcher: %s", e)
            self._observer = None
            return False
        logger.info("Watching import folder: %s", self.folder)
        return True

    def stop(self):
        if self._observer:
            self._observer.stop()
            self._observer.join()
            self._observer = None
            logger.info("Import folder watcher stopped")
