# Path: core/studio/events.py
# Purpose: Let listeners customize the metadata of a figure before it is built.
# Layer: core/studio.
# Details: Synchronous observer list; listeners return replacement metadata instead of mutating it.

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, List, Optional

from core.models.domain import Metadata

from .resolver import ResolvedResource


@dataclass(frozen=True)
class FileMetadataEvent:
    """Payload handed to metadata listeners."""

    resource: ResolvedResource
    metadata: Metadata

    def with_metadata(self, metadata: Metadata) -> "FileMetadataEvent":
        return replace(self, metadata=metadata)


MetadataListener = Callable[[FileMetadataEvent], Optional[Metadata]]


class MetadataDispatcher:
    """Dispatch FileMetadataEvent to every registered listener in registration order."""

    def __init__(self) -> None:
        self._listeners: List[MetadataListener] = []

    def add_listener(self, listener: MetadataListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: MetadataListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def dispatch(self, event: FileMetadataEvent) -> Metadata:
        """Return the metadata after all listeners had the chance to replace it."""

        for listener in self._listeners:
            replacement = listener(event)
            if replacement is not None:
                event = event.with_metadata(replacement)
        return event.metadata
