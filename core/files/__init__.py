# Path: core/files/__init__.py
# Purpose: Package initializer for the file record database.
# Layer: core/files.
# Details: Exposes record storage, uuid validation, and upload folder synchronization.

from .records import RecordStore, SqliteRecordStore
from .scanner import SUPPORTED_EXTENSIONS, FileSynchronizer
from .validator import UuidValidator, uuid_to_string

__all__ = [
    "RecordStore",
    "SqliteRecordStore",
    "SUPPORTED_EXTENSIONS",
    "FileSynchronizer",
    "UuidValidator",
    "uuid_to_string",
]
