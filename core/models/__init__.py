# Path: core/models/__init__.py
# Purpose: Package initializer for domain model definitions.
# Layer: core/models.
# Details: Exposes dataclasses used across record storage, resolution, and figure building.

from .domain import (
    FileRecord,
    Identifier,
    ImageHandle,
    LocaleContext,
    Metadata,
    NumericKey,
    OpaqueHandle,
    PathString,
    RecordReference,
    ResizeOptions,
    SizeConfig,
    UniqueId,
    classify_identifier,
)

__all__ = [
    "FileRecord",
    "Identifier",
    "ImageHandle",
    "LocaleContext",
    "Metadata",
    "NumericKey",
    "OpaqueHandle",
    "PathString",
    "RecordReference",
    "ResizeOptions",
    "SizeConfig",
    "UniqueId",
    "classify_identifier",
]
