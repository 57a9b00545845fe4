# Path: core/models/domain.py
# Purpose: Define domain models shared across record storage, resolution, and figure building.
# Layer: core/models.
# Details: Lightweight dataclasses keep the resolver and builder independent from storage backends.

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterator, Mapping, Optional, Protocol, Tuple, Union, runtime_checkable

NUMERIC_KEY_PATTERN = re.compile(r"^\d+$")


@runtime_checkable
class ImageHandle(Protocol):
    """An already resolved in-memory image exposing its own absolute path."""

    def get_path(self) -> str:
        """Return the absolute path of the underlying image file."""


@dataclass
class FileRecord:
    """Entry of the file record database describing a file or folder below the upload path."""

    id: int
    uuid: Optional[Union[str, bytes]]
    type: str
    path: str
    meta: Optional[Union[str, Mapping]] = None
    name: Optional[str] = None

    @property
    def is_file(self) -> bool:
        return self.type == "file"


class Metadata(Mapping[str, str]):
    """Immutable, ordered presentation metadata of a file."""

    VALUE_TITLE = "title"
    VALUE_ALT = "alt"
    VALUE_URL = "link"
    VALUE_CAPTION = "caption"
    VALUE_UUID = "uuid"

    def __init__(self, values: Optional[Mapping[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(values or {})

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Metadata):
            return self._values == other._values
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._values.items()))

    def __repr__(self) -> str:
        return f"Metadata({self._values!r})"

    def has(self, key: str) -> bool:
        return key in self._values

    def all(self) -> Dict[str, str]:
        """Return a copy of all values in insertion order."""

        return dict(self._values)

    def with_values(self, **values: str) -> "Metadata":
        """Return a new instance with the given values added or replaced."""

        merged = dict(self._values)
        merged.update(values)
        return Metadata(merged)

    @property
    def empty(self) -> bool:
        return not self._values

    @property
    def title(self) -> Optional[str]:
        return self._values.get(self.VALUE_TITLE)

    @property
    def alt(self) -> Optional[str]:
        return self._values.get(self.VALUE_ALT)

    @property
    def url(self) -> Optional[str]:
        return self._values.get(self.VALUE_URL)

    @property
    def caption(self) -> Optional[str]:
        return self._values.get(self.VALUE_CAPTION)

    @property
    def uuid(self) -> Optional[str]:
        return self._values.get(self.VALUE_UUID)


@dataclass(frozen=True)
class SizeConfig:
    """Requested output dimensions of an image.

    Modes:
    - proportional: scale to the given width or height keeping the aspect ratio.
    - crop: produce exactly width x height, cropping the overflow.
    - box: fit inside width x height keeping the aspect ratio.
    """

    width: Optional[int] = None
    height: Optional[int] = None
    mode: str = "proportional"

    @classmethod
    def coerce(cls, value: object) -> Optional["SizeConfig"]:
        """Turn a tuple/list size into a SizeConfig; other values yield None."""

        if isinstance(value, SizeConfig):
            return value
        if isinstance(value, (tuple, list)) and 2 <= len(value) <= 3:
            width = int(value[0]) if value[0] else None
            height = int(value[1]) if value[1] else None
            mode = str(value[2]) if len(value) == 3 and value[2] else "proportional"
            return cls(width=width, height=height, mode=mode)
        return None


@dataclass(frozen=True)
class ResizeOptions:
    """Options controlling how the image studio writes resized images."""

    target_dir: Optional[Path] = None
    bypass_cache: bool = False
    skip_if_dimensions_match: bool = True


@dataclass(frozen=True)
class LocaleContext:
    """Locales of the page a figure is rendered on."""

    page_locale: Optional[str] = None
    page_fallback_locale: Optional[str] = None


# Identifier shapes accepted by the resolver. Each carries a fixed ``kind`` discriminant.


@dataclass(frozen=True)
class RecordReference:
    record: FileRecord
    kind: str = "record"


@dataclass(frozen=True)
class UniqueId:
    value: Union[str, bytes]
    kind: str = "uuid"


@dataclass(frozen=True)
class NumericKey:
    value: int
    kind: str = "id"


@dataclass(frozen=True)
class PathString:
    value: Union[str, Path]
    auto_detect_records: bool = True
    kind: str = "path"


@dataclass(frozen=True)
class OpaqueHandle:
    handle: ImageHandle
    kind: str = "image"


Identifier = Union[RecordReference, UniqueId, NumericKey, PathString, OpaqueHandle]
IDENTIFIER_TYPES: Tuple[type, ...] = (RecordReference, UniqueId, NumericKey, PathString, OpaqueHandle)


def classify_identifier(value: object, is_unique_id: Callable[[object], bool]) -> Identifier:
    """Map a raw identifier onto its tagged shape.

    Strings are tried as unique id, then as bare integer, then as path.
    """

    if isinstance(value, IDENTIFIER_TYPES):
        return value  # type: ignore[return-value]
    if isinstance(value, FileRecord):
        return RecordReference(value)
    if isinstance(value, ImageHandle):
        return OpaqueHandle(value)
    if isinstance(value, bool):
        raise TypeError("Boolean values are not valid resource identifiers.")
    if isinstance(value, int):
        return NumericKey(value)
    if isinstance(value, bytes) and is_unique_id(value):
        return UniqueId(value)
    if isinstance(value, Path):
        return PathString(value)
    if isinstance(value, str):
        if is_unique_id(value):
            return UniqueId(value)
        if NUMERIC_KEY_PATTERN.match(value):
            return NumericKey(int(value))
        return PathString(value)
    raise TypeError(f"Unsupported resource identifier of type {type(value).__name__}.")
