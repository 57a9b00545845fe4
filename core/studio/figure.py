# Path: core/studio/figure.py
# Purpose: Define the immutable result of a figure build.
# Layer: core/studio.
# Details: Bundles the image, metadata, link settings, optional lightbox, and free-form options.

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from core.models.domain import Metadata

from .image import ImageResult, LightboxResult


@dataclass(frozen=True)
class Figure:
    """A resolved image together with everything needed to present it."""

    image: ImageResult
    metadata: Optional[Metadata] = None
    link_attributes: Mapping[str, str] = field(default_factory=dict)
    link_href: Optional[str] = None
    lightbox: Optional[LightboxResult] = None
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "link_attributes", MappingProxyType(dict(self.link_attributes)))
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    @property
    def has_metadata(self) -> bool:
        return self.metadata is not None

    @property
    def has_lightbox(self) -> bool:
        return self.lightbox is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "image": self.image.to_dict(),
            "metadata": self.metadata.all() if self.metadata is not None else None,
            "link_attributes": dict(self.link_attributes),
            "link_href": self.link_href,
            "lightbox": self.lightbox.to_dict() if self.lightbox is not None else None,
            "options": dict(self.options),
        }
