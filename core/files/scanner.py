# Path: core/files/scanner.py
# Purpose: Scan the upload folder and register image files in the record database.
# Layer: core/files.
# Details: Provides filesystem scanning reused by the sync script and tests.

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List

from tqdm import tqdm

from .records import SqliteRecordStore

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}


class FileSynchronizer:
    """Keep the record database in line with the image files below the upload path."""

    def __init__(
        self,
        project_dir: Path,
        upload_path: str,
        store: SqliteRecordStore,
        extensions: Iterable[str] = SUPPORTED_EXTENSIONS,
    ) -> None:
        self.project_dir = Path(project_dir).resolve()
        self.upload_dir = self.project_dir / upload_path
        self.store = store
        self.extensions = {ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions}

    def scan(self) -> List[Path]:
        """Return image files below the upload folder sorted by path."""

        if not self.upload_dir.is_dir():
            return []
        return sorted(path for path in self.upload_dir.rglob("*") if path.is_file() and path.suffix.lower() in self.extensions)

    def sync(self, show_progress: bool = False) -> int:
        """
        Register every scanned file that has no record yet.

        Returns the number of newly added records.
        """

        added = 0
        for path in tqdm(self.scan(), desc="Syncing files", unit="file", disable=not show_progress):
            if self.store.find_by_path(path) is not None:
                continue
            self.store.add_file(path)
            added += 1
        logger.info("Synchronized %s: %d new record(s)", self.upload_dir, added)
        return added
