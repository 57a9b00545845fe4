# Path: core/files/records.py
# Purpose: Persist and look up file records backing the upload folder.
# Layer: core/files.
# Details: Defines the RecordStore lookup interface and its SQLite implementation.

from __future__ import annotations

import json
import logging
import sqlite3
import uuid
from pathlib import Path
from typing import List, Mapping, Optional, Protocol, Union

from core.models.domain import FileRecord

from .validator import uuid_to_string

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    """Lookup interface the resolver uses to find file records."""

    def find_by_uuid(self, value: Union[str, bytes]) -> Optional[FileRecord]:
        """Return the record with the given textual or binary uuid."""

    def find_by_id(self, record_id: int) -> Optional[FileRecord]:
        """Return the record with the given numeric primary key."""

    def find_by_path(self, path: Union[str, Path]) -> Optional[FileRecord]:
        """Return the record stored for the given absolute or project relative path."""


class SqliteRecordStore:
    """RecordStore backed by a single SQLite table.

    Paths are stored project relative in POSIX form, uuids in canonical text
    form and metadata as a JSON encoded locale-keyed mapping.
    """

    def __init__(self, database_path: Path | str, project_dir: Path | str = Path(".")) -> None:
        self.database_path = Path(database_path)
        self.project_dir = Path(project_dir).resolve()
        self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.database_path)

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS files (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    uuid TEXT NOT NULL UNIQUE,
                    type TEXT NOT NULL DEFAULT 'file',
                    path TEXT NOT NULL UNIQUE,
                    name TEXT,
                    meta TEXT
                )
                """
            )
            conn.commit()

    def _relative_path(self, path: Union[str, Path]) -> str:
        candidate = Path(path)
        if candidate.is_absolute():
            try:
                candidate = candidate.resolve().relative_to(self.project_dir)
            except ValueError:
                return candidate.as_posix()
        return candidate.as_posix()

    @staticmethod
    def _row_to_record(row: Optional[tuple]) -> Optional[FileRecord]:
        if row is None:
            return None
        return FileRecord(id=row[0], uuid=row[1], type=row[2], path=row[3], name=row[4], meta=row[5])

    def _fetch_one(self, where: str, params: tuple) -> Optional[FileRecord]:
        with self._connect() as conn:
            cursor = conn.execute(f"SELECT id, uuid, type, path, name, meta FROM files WHERE {where}", params)
            return self._row_to_record(cursor.fetchone())

    # Writes
    def add_file(
        self,
        path: Union[str, Path],
        meta: Optional[Mapping] = None,
        type: str = "file",
        record_uuid: Optional[str] = None,
    ) -> FileRecord:
        """Insert a record for the given path and return it; existing paths are returned unchanged."""

        relative = self._relative_path(path)
        existing = self.find_by_path(relative)
        if existing is not None:
            return existing

        value = uuid_to_string(record_uuid) if record_uuid else str(uuid.uuid4())
        payload = json.dumps(meta) if meta else None
        with self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO files (uuid, type, path, name, meta) VALUES (?, ?, ?, ?, ?)",
                (value, type, relative, Path(relative).name, payload),
            )
            conn.commit()
            record_id = cursor.lastrowid
        logger.debug("Registered %s record %s for %s", type, value, relative)
        return FileRecord(id=int(record_id), uuid=value, type=type, path=relative, name=Path(relative).name, meta=payload)

    def update_meta(self, record_id: int, meta: Optional[Mapping]) -> None:
        """Replace the locale-keyed metadata of a record."""

        with self._connect() as conn:
            conn.execute("UPDATE files SET meta = ? WHERE id = ?", (json.dumps(meta) if meta else None, record_id))
            conn.commit()

    def remove(self, record_id: int) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM files WHERE id = ?", (record_id,))
            conn.commit()

    # Lookups
    def find_by_uuid(self, value: Union[str, bytes]) -> Optional[FileRecord]:
        text = uuid_to_string(value)
        if text is None:
            return None
        return self._fetch_one("uuid = ?", (text,))

    def find_by_id(self, record_id: int) -> Optional[FileRecord]:
        return self._fetch_one("id = ?", (int(record_id),))

    def find_by_path(self, path: Union[str, Path]) -> Optional[FileRecord]:
        return self._fetch_one("path = ?", (self._relative_path(path),))

    def list_records(self) -> List[FileRecord]:
        with self._connect() as conn:
            cursor = conn.execute("SELECT id, uuid, type, path, name, meta FROM files ORDER BY path")
            rows = cursor.fetchall()
        return [record for record in (self._row_to_record(row) for row in rows) if record is not None]
