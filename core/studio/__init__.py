# Path: core/studio/__init__.py
# Purpose: Package initializer for figure building.
# Layer: core/studio.
# Details: Exposes the resolver, builder, image service interfaces, events, and error types.

from .builder import FigureBuilder
from .errors import (
    InvalidArgumentError,
    InvalidResourceError,
    MissingResourceError,
    NotAFileError,
    RecordNotFoundError,
    ResourceNotFoundError,
)
from .events import FileMetadataEvent, MetadataDispatcher
from .figure import Figure
from .image import ImageResult, ImageStudio, LightboxResult, PillowImageStudio
from .resolver import ResolvedResource, ResourceResolver

__all__ = [
    "FigureBuilder",
    "InvalidArgumentError",
    "InvalidResourceError",
    "MissingResourceError",
    "NotAFileError",
    "RecordNotFoundError",
    "ResourceNotFoundError",
    "FileMetadataEvent",
    "MetadataDispatcher",
    "Figure",
    "ImageResult",
    "ImageStudio",
    "LightboxResult",
    "PillowImageStudio",
    "ResolvedResource",
    "ResourceResolver",
]
