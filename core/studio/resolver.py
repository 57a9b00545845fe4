# Path: core/studio/resolver.py
# Purpose: Resolve heterogeneous identifiers into exactly one existing file below the project root.
# Layer: core/studio.
# Details: Dispatches on the identifier kind; lookup failures are returned as errors instead of raised.

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional, Tuple, Union
from urllib.parse import unquote

from core.files.records import RecordStore
from core.files.validator import UuidValidator, uuid_to_string
from core.models.domain import (
    FileRecord,
    Identifier,
    ImageHandle,
    classify_identifier,
)

from .errors import InvalidResourceError, NotAFileError, RecordNotFoundError, ResourceNotFoundError

logger = logging.getLogger(__name__)

EXTERNAL_URL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)


@dataclass(frozen=True)
class ResolvedResource:
    """A file that existed below the project root at resolve time."""

    absolute_path: Path
    record: Optional[FileRecord] = None


Resolution = Union[ResolvedResource, InvalidResourceError]
LightboxTarget = Union[ImageHandle, str, Path]


class ResourceResolver:
    """Turn records, uuids, numeric keys, paths, and image handles into a ResolvedResource."""

    def __init__(
        self,
        project_dir: Path | str,
        upload_path: str = "files",
        record_store: Optional[RecordStore] = None,
        validator: Optional[Callable[[object], bool]] = None,
    ) -> None:
        self.project_dir = Path(os.path.normpath(os.path.abspath(project_dir)))
        self.upload_dir = self.project_dir / upload_path
        self.record_store = record_store
        self.is_unique_id = validator or UuidValidator()
        self._handlers: Dict[str, Callable[[Identifier], Resolution]] = {
            "record": lambda identifier: self.resolve_record(identifier.record),  # type: ignore[union-attr]
            "uuid": lambda identifier: self.resolve_uuid(identifier.value),  # type: ignore[union-attr]
            "id": lambda identifier: self.resolve_id(identifier.value),  # type: ignore[union-attr]
            "path": lambda identifier: self.resolve_path(identifier.value, identifier.auto_detect_records),  # type: ignore[union-attr]
            "image": lambda identifier: self.resolve_image(identifier.handle),  # type: ignore[union-attr]
        }

    def classify(self, value: object) -> Identifier:
        return classify_identifier(value, self.is_unique_id)

    def resolve(self, identifier: object) -> Resolution:
        """
        Resolve any supported identifier.

        Raw values are classified first: unique id, then numeric key, then path.
        Raises TypeError for values that cannot be an identifier at all.
        """

        tagged = self.classify(identifier)
        return self._handlers[tagged.kind](tagged)

    def resolve_record(self, record: FileRecord) -> Resolution:
        if not record.is_file:
            return NotAFileError(record.path)

        absolute_path = self.absolute(record.path)
        if not absolute_path.is_file():
            return ResourceNotFoundError(absolute_path)

        logger.debug("Resolved record %s to %s", record.id, absolute_path)
        return ResolvedResource(absolute_path=absolute_path, record=record)

    def resolve_uuid(self, value: Union[str, bytes]) -> Resolution:
        record = self.record_store.find_by_uuid(value) if self.record_store is not None else None
        if record is None:
            key = value
            if isinstance(value, bytes):
                key = uuid_to_string(value) or value.hex()
            return RecordNotFoundError("uuid", key)
        return self.resolve_record(record)

    def resolve_id(self, record_id: int) -> Resolution:
        record = self.record_store.find_by_id(int(record_id)) if self.record_store is not None else None
        if record is None:
            return RecordNotFoundError("id", record_id)
        return self.resolve_record(record)

    def resolve_path(self, path: Union[str, Path], auto_detect_records: bool = True) -> Resolution:
        """
        Resolve an absolute or project relative path.

        Files below the upload folder are looked up in the record store first so
        that their metadata becomes available; the file must exist either way.
        """

        absolute_path = self.absolute(path)
        if auto_detect_records and self.record_store is not None and self.is_upload_path(absolute_path):
            record = self.record_store.find_by_path(absolute_path)
            if record is not None:
                return self.resolve_record(record)

        if not absolute_path.is_file():
            return ResourceNotFoundError(absolute_path)

        logger.debug("Resolved path %s", absolute_path)
        return ResolvedResource(absolute_path=absolute_path)

    def resolve_image(self, handle: ImageHandle) -> Resolution:
        return self.resolve_path(handle.get_path(), auto_detect_records=False)

    def resolve_lightbox_target(
        self, target: LightboxTarget, valid_extensions: Iterable[str]
    ) -> Tuple[Optional[Union[ImageHandle, Path]], Optional[str]]:
        """
        Classify a lightbox target into (resource, url).

        Targets without a valid image extension and local paths that do not
        exist yield (None, None).
        """

        if isinstance(target, ImageHandle):
            return target, None

        text = str(target)
        extension = os.path.splitext(text.split("?", 1)[0])[1].lstrip(".").lower()
        if extension not in {ext.lower().lstrip(".") for ext in valid_extensions}:
            return None, None

        if EXTERNAL_URL_PATTERN.match(text):
            return None, text

        absolute_path = self.absolute(text)
        if not absolute_path.is_file():
            absolute_path = self.absolute(unquote(text))
        if not absolute_path.is_file():
            return None, None
        return absolute_path, None

    def absolute(self, path: Union[str, Path]) -> Path:
        """Return the canonical absolute form of a path, joined to the project root if relative."""

        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self.project_dir / candidate
        return Path(os.path.normpath(candidate))

    def is_upload_path(self, absolute_path: Path) -> bool:
        try:
            absolute_path.relative_to(self.upload_dir)
        except ValueError:
            return False
        return True


__all__ = ["ResolvedResource", "Resolution", "ResourceResolver"]
