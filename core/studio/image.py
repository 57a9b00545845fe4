# Path: core/studio/image.py
# Purpose: Define the image service used by figures and its Pillow based implementation.
# Layer: core/studio.
# Details: Image results compute their target dimensions lazily and write resized copies on demand.

from __future__ import annotations

import hashlib
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from PIL import Image, ImageOps

from core.models.domain import ImageHandle, ResizeOptions, SizeConfig

logger = logging.getLogger(__name__)

Size = Union[None, SizeConfig, Tuple, list, str]


def compute_target_dimensions(original: Tuple[int, int], size: Optional[SizeConfig]) -> Tuple[int, int]:
    """Return the output (width, height) for an image of the given original dimensions."""

    width, height = original
    if size is None or (not size.width and not size.height):
        return width, height

    if size.mode == "crop" and size.width and size.height:
        return size.width, size.height

    if size.mode == "box" and size.width and size.height:
        scale = min(size.width / width, size.height / height)
        return max(1, round(width * scale)), max(1, round(height * scale))

    if size.width:
        return size.width, max(1, round(height * size.width / width))
    assert size.height is not None
    return max(1, round(width * size.height / height)), size.height


class ImageResult:
    """An image of a figure: the source file plus the size it should be rendered at."""

    def __init__(
        self,
        path: Path,
        size: Size = None,
        resize_options: Optional[ResizeOptions] = None,
        size_config: Optional[SizeConfig] = None,
    ) -> None:
        self.path = Path(path)
        self.size = size
        self.resize_options = resize_options
        self.size_config = size_config if size_config is not None else SizeConfig.coerce(size)
        self._original_dimensions: Optional[Tuple[int, int]] = None

    def get_path(self) -> str:
        return str(self.path)

    @property
    def original_dimensions(self) -> Tuple[int, int]:
        if self._original_dimensions is None:
            with Image.open(self.path) as img:
                self._original_dimensions = img.size
        return self._original_dimensions

    @property
    def target_dimensions(self) -> Tuple[int, int]:
        return compute_target_dimensions(self.original_dimensions, self.size_config)

    def needs_resize(self) -> bool:
        return self.target_dimensions != self.original_dimensions

    def resize(self) -> Path:
        """
        Write the resized image into the target folder and return its path.

        The source path is returned when no resize is needed or no target folder is configured.
        """

        options = self.resize_options or ResizeOptions()
        if options.target_dir is None:
            return self.path
        if options.skip_if_dimensions_match and not self.needs_resize():
            return self.path

        width, height = self.target_dimensions
        digest = hashlib.sha1(f"{self.path}:{width}x{height}:{self.size_config}".encode("utf-8")).hexdigest()[:10]
        target = Path(options.target_dir) / f"{self.path.stem}-{digest}{self.path.suffix}"
        if target.exists() and not options.bypass_cache:
            return target

        target.parent.mkdir(parents=True, exist_ok=True)
        with Image.open(self.path) as img:
            if self.size_config is not None and self.size_config.mode == "crop":
                resized = ImageOps.fit(img, (width, height))
            else:
                resized = img.resize((width, height))
            resized.save(target)
        logger.debug("Resized %s to %dx%d at %s", self.path, width, height, target)
        return target

    def to_dict(self) -> Dict[str, object]:
        width, height = self.target_dimensions
        return {"path": str(self.path), "width": width, "height": height}


class LightboxResult:
    """Alternate (usually larger) variant of a figure shown in an overlay."""

    def __init__(
        self,
        image: Optional[ImageResult] = None,
        url: Optional[str] = None,
        group_identifier: Optional[str] = None,
    ) -> None:
        if image is None and url is None:
            raise ValueError("A lightbox requires either an image or a url.")
        self.image = image
        self.url = url
        self.group_identifier = group_identifier

    @property
    def has_image(self) -> bool:
        return self.image is not None

    @property
    def link_href(self) -> str:
        if self.url is not None:
            return self.url
        assert self.image is not None
        return self.image.get_path()

    def to_dict(self) -> Dict[str, object]:
        return {
            "href": self.link_href,
            "group": self.group_identifier,
            "image": self.image.to_dict() if self.image is not None else None,
        }


class ImageStudio(ABC):
    """Image service creating the renderable parts of a figure."""

    @abstractmethod
    def create_image(
        self,
        path: Union[str, Path, ImageHandle],
        size: Size = None,
        resize_options: Optional[ResizeOptions] = None,
    ) -> ImageResult:
        """Return the image result for a resolved file."""

    @abstractmethod
    def create_lightbox_image(
        self,
        resource: Union[None, str, Path, ImageHandle],
        url: Optional[str] = None,
        size: Size = None,
        group_identifier: Optional[str] = None,
        resize_options: Optional[ResizeOptions] = None,
    ) -> LightboxResult:
        """Return the lightbox result for a local resource or an external url."""


class PillowImageStudio(ImageStudio):
    """ImageStudio reading image dimensions with Pillow and caching resized copies on disk."""

    def __init__(
        self,
        cache_dir: Optional[Path] = None,
        predefined_sizes: Optional[Dict[str, Tuple[int, int, str]]] = None,
    ) -> None:
        self.cache_dir = Path(cache_dir) if cache_dir is not None else None
        self.predefined_sizes = dict(predefined_sizes or {})

    def _size_config(self, size: Size) -> Optional[SizeConfig]:
        if isinstance(size, str):
            predefined = self.predefined_sizes.get(size)
            if predefined is None:
                logger.debug("Ignoring unknown image size %r", size)
                return None
            return SizeConfig.coerce(predefined)
        return SizeConfig.coerce(size)

    def _resize_options(self, resize_options: Optional[ResizeOptions]) -> ResizeOptions:
        if resize_options is not None:
            return resize_options
        return ResizeOptions(target_dir=self.cache_dir)

    def create_image(
        self,
        path: Union[str, Path, ImageHandle],
        size: Size = None,
        resize_options: Optional[ResizeOptions] = None,
    ) -> ImageResult:
        if isinstance(path, ImageHandle):
            path = path.get_path()
        return ImageResult(Path(path), size, self._resize_options(resize_options), size_config=self._size_config(size))

    def create_lightbox_image(
        self,
        resource: Union[None, str, Path, ImageHandle],
        url: Optional[str] = None,
        size: Size = None,
        group_identifier: Optional[str] = None,
        resize_options: Optional[ResizeOptions] = None,
    ) -> LightboxResult:
        image = None
        if resource is not None:
            image = self.create_image(resource, size, resize_options)
        return LightboxResult(image=image, url=url, group_identifier=group_identifier)


__all__ = ["ImageResult", "ImageStudio", "LightboxResult", "PillowImageStudio", "compute_target_dimensions"]
