# Path: core/studio/errors.py
# Purpose: Define the error taxonomy of resource resolution and figure building.
# Layer: core/studio.
# Details: Resolution errors are retained by the builder; argument and state errors are raised immediately.

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class InvalidResourceError(Exception):
    """Raised (or retained) when an identifier does not resolve to an existing file."""

    def __init__(self, message: str, *, path: Optional[Union[str, Path]] = None) -> None:
        super().__init__(message)
        self.path = str(path) if path is not None else None


class NotAFileError(InvalidResourceError):
    """The referenced file record is a folder or another non-file entry."""

    def __init__(self, path: str) -> None:
        super().__init__(f"DBAFS item '{path}' is not a file.", path=path)


class ResourceNotFoundError(InvalidResourceError):
    """Nothing exists at the resolved file system location."""

    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__(f"No resource could be located at path '{path}'.", path=path)


class RecordNotFoundError(InvalidResourceError):
    """The record database holds no entry for the given key."""

    LABELS = {"uuid": "UUID", "id": "ID"}

    def __init__(self, kind: str, key: object) -> None:
        label = self.LABELS.get(kind, kind)
        super().__init__(f"DBAFS item with {label} '{key}' could not be found.")
        self.kind = kind
        self.key = key


class InvalidArgumentError(ValueError):
    """Raised when builder options are called with malformed values."""


class MissingResourceError(RuntimeError):
    """Raised when a figure is built before any resource was defined."""
