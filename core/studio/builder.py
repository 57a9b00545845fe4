# Path: core/studio/builder.py
# Purpose: Assemble figures from a resolved resource and builder-configured presentation options.
# Layer: core/studio.
# Details: Fluent, reusable builder; resolution errors are retained until build() is called.

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from config.settings import StudioSettings
from core.files.records import RecordStore
from core.files.validator import UuidValidator
from core.models.domain import FileRecord, ImageHandle, LocaleContext, Metadata, ResizeOptions

from .errors import InvalidArgumentError, InvalidResourceError, MissingResourceError
from .events import FileMetadataEvent, MetadataDispatcher
from .figure import Figure
from .image import ImageStudio, LightboxResult, Size
from .metadata import DEFAULT_META_FIELDS, derive_metadata, locale_chain, with_record_uuid
from .resolver import EXTERNAL_URL_PATTERN, LightboxTarget, Resolution, ResolvedResource, ResourceResolver

logger = logging.getLogger(__name__)


@dataclass
class _BuilderOptions:
    """Presentation options kept across builds until they are overwritten."""

    size: Size = None
    resize_options: Optional[ResizeOptions] = None
    metadata: Optional[Metadata] = None
    metadata_disabled: bool = False
    locale: Optional[str] = None
    link_attributes: Dict[str, str] = field(default_factory=dict)
    link_href: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)
    lightbox_size: Size = None
    lightbox_group_identifier: Optional[str] = None
    lightbox_resize_options: Optional[ResizeOptions] = None
    lightbox_enabled: bool = False

    def snapshot(self) -> "_BuilderOptions":
        return replace(self, link_attributes=dict(self.link_attributes), options=dict(self.options))


@dataclass
class _ResourceState:
    """Resource of the next build; replaced by every from_* call."""

    resolution: Optional[Resolution] = None
    lightbox_target: Optional[LightboxTarget] = None


class FigureBuilder:
    """Fluent builder turning any file identifier into a Figure.

    One instance may produce several figures: options survive a build, the
    resource (and its lightbox target) is redefined with the next from_* call.
    """

    def __init__(
        self,
        resolver: ResourceResolver,
        studio: ImageStudio,
        valid_extensions: Iterable[str] = ("jpg", "jpeg", "png", "gif", "webp"),
        dispatcher: Optional[MetadataDispatcher] = None,
        locale_context: Optional[LocaleContext] = None,
        meta_fields: Iterable[str] = DEFAULT_META_FIELDS,
    ) -> None:
        self.resolver = resolver
        self.studio = studio
        self.valid_extensions = tuple(ext.lower().lstrip(".") for ext in valid_extensions)
        self.dispatcher = dispatcher
        self.locale_context = locale_context
        self.meta_fields = tuple(meta_fields)
        self._options = _BuilderOptions()
        self._resource = _ResourceState()

    @classmethod
    def from_settings(
        cls,
        settings: StudioSettings,
        studio: ImageStudio,
        record_store: Optional[RecordStore] = None,
        dispatcher: Optional[MetadataDispatcher] = None,
        locale_context: Optional[LocaleContext] = None,
    ) -> "FigureBuilder":
        """Wire a builder from application settings."""

        resolver = ResourceResolver(
            project_dir=settings.project_dir,
            upload_path=settings.upload_path,
            record_store=record_store,
            validator=UuidValidator(),
        )
        return cls(
            resolver=resolver,
            studio=studio,
            valid_extensions=settings.normalized_extensions(),
            dispatcher=dispatcher,
            locale_context=locale_context,
            meta_fields=settings.meta_fields,
        )

    # Resource definition
    def _define_resource(self, resolution: Resolution) -> "FigureBuilder":
        if isinstance(resolution, InvalidResourceError):
            logger.debug("Retaining resolution error: %s", resolution)
        self._resource = _ResourceState(resolution=resolution)
        return self

    def from_record(self, record: FileRecord) -> "FigureBuilder":
        return self._define_resource(self.resolver.resolve_record(record))

    def from_uuid(self, value: Union[str, bytes]) -> "FigureBuilder":
        return self._define_resource(self.resolver.resolve_uuid(value))

    def from_id(self, record_id: int) -> "FigureBuilder":
        return self._define_resource(self.resolver.resolve_id(record_id))

    def from_path(self, path: Union[str, Path], auto_detect_records: bool = True) -> "FigureBuilder":
        return self._define_resource(self.resolver.resolve_path(path, auto_detect_records))

    def from_image(self, image: ImageHandle) -> "FigureBuilder":
        return self._define_resource(self.resolver.resolve_image(image))

    def from_(self, identifier: object) -> "FigureBuilder":
        """Define the resource from a record, image handle, uuid, numeric id, or path."""

        return self._define_resource(self.resolver.resolve(identifier))

    def get_last_exception(self) -> Optional[InvalidResourceError]:
        resolution = self._resource.resolution
        return resolution if isinstance(resolution, InvalidResourceError) else None

    # Image options
    def set_size(self, size: Size) -> "FigureBuilder":
        self._options.size = size
        return self

    def set_resize_options(self, resize_options: Optional[ResizeOptions]) -> "FigureBuilder":
        self._options.resize_options = resize_options
        return self

    def set_options(self, options: Mapping[str, Any]) -> "FigureBuilder":
        self._options.options = dict(options)
        return self

    # Metadata
    def set_metadata(self, metadata: Optional[Metadata]) -> "FigureBuilder":
        self._options.metadata = metadata
        self._options.metadata_disabled = False
        return self

    def disable_metadata(self, disable: bool = True) -> "FigureBuilder":
        self._options.metadata_disabled = disable
        return self

    def set_locale(self, locale: Optional[str]) -> "FigureBuilder":
        self._options.locale = locale
        return self

    # Links
    def set_link_attribute(self, attribute: str, value: Optional[str]) -> "FigureBuilder":
        if value is None:
            self._options.link_attributes.pop(attribute, None)
        else:
            self._options.link_attributes[attribute] = value
        return self

    def set_link_attributes(self, attributes: Mapping[str, str]) -> "FigureBuilder":
        if not isinstance(attributes, Mapping):
            raise InvalidArgumentError("Link attributes must be a mapping of strings to strings.")
        for key, value in attributes.items():
            if not isinstance(key, str):
                raise InvalidArgumentError(f"Link attribute keys must be strings, got {type(key).__name__}.")
            if not isinstance(value, str):
                raise InvalidArgumentError(f"Link attribute '{key}' must be a string, got {type(value).__name__}.")
        self._options.link_attributes = dict(attributes)
        return self

    def set_link_href(self, url: Optional[str]) -> "FigureBuilder":
        self._options.link_href = url
        return self

    # Lightbox
    def set_lightbox_resource_or_url(self, resource_or_url: Optional[LightboxTarget]) -> "FigureBuilder":
        """
        Set the lightbox target: an image handle, a local path, or an external url.

        Targets are classified at build time; unusable ones leave the figure without lightbox.
        The target belongs to the current resource: call this after from_*(), which clears it.
        """

        if self._resource.resolution is None:
            logger.debug("Lightbox target %s set before a resource; the next from_* call discards it", resource_or_url)
        self._resource.lightbox_target = resource_or_url
        return self

    def set_lightbox_size(self, size: Size) -> "FigureBuilder":
        self._options.lightbox_size = size
        return self

    def set_lightbox_group_identifier(self, group_identifier: Optional[str]) -> "FigureBuilder":
        self._options.lightbox_group_identifier = group_identifier
        return self

    def set_lightbox_resize_options(self, resize_options: Optional[ResizeOptions]) -> "FigureBuilder":
        self._options.lightbox_resize_options = resize_options
        return self

    def enable_lightbox(self, enable: bool = True) -> "FigureBuilder":
        self._options.lightbox_enabled = enable
        return self

    # Building
    def build_if_resource_exists(self) -> Optional[Figure]:
        """Like build(), but return None if the resource could not be resolved."""

        if self.get_last_exception() is not None:
            return None
        return self.build()

    def build(self) -> Figure:
        """
        Create a Figure from the current resource and options.

        Raises MissingResourceError if no resource was defined and the retained
        InvalidResourceError if the last defined resource could not be resolved.
        """

        resolution = self._resource.resolution
        if resolution is None:
            raise MissingResourceError("A resource must be defined (from_* call) before building a figure.")
        if isinstance(resolution, InvalidResourceError):
            raise resolution

        options = self._options.snapshot()
        lightbox_target = self._resource.lightbox_target

        metadata = self._resolve_metadata(resolution, options)
        if metadata is not None and self.dispatcher is not None:
            metadata = self.dispatcher.dispatch(FileMetadataEvent(resource=resolution, metadata=metadata))

        image = self.studio.create_image(resolution.absolute_path, options.size, options.resize_options)
        lightbox = None
        fullsize_url = None
        if options.lightbox_enabled:
            target = self._select_lightbox_target(resolution, metadata, lightbox_target)
            lightbox = self._build_lightbox(target, options)
            if lightbox is None and isinstance(target, str) and EXTERNAL_URL_PATTERN.match(target):
                fullsize_url = target

        link_attributes: Dict[str, str] = {}
        if fullsize_url is not None:
            # Fullsize link to a foreign resource opens in a new window.
            link_attributes["target"] = "_blank"
        link_attributes.update(options.link_attributes)

        return Figure(
            image=image,
            metadata=metadata,
            link_attributes=link_attributes,
            link_href=self._resolve_link_href(options, metadata, lightbox, fullsize_url),
            lightbox=lightbox,
            options=options.options,
        )

    def _resolve_metadata(self, resource: ResolvedResource, options: _BuilderOptions) -> Optional[Metadata]:
        if options.metadata_disabled:
            return None
        if options.metadata is not None:
            return with_record_uuid(options.metadata, resource.record)
        if resource.record is None:
            return None
        locales = locale_chain(options.locale, self.locale_context)
        return derive_metadata(resource.record, locales, self.meta_fields)

    @staticmethod
    def _select_lightbox_target(
        resource: ResolvedResource,
        metadata: Optional[Metadata],
        lightbox_target: Optional[LightboxTarget],
    ) -> LightboxTarget:
        # Explicit target first, then the metadata link, then the figure's own file.
        if lightbox_target is not None:
            return lightbox_target
        if metadata is not None and metadata.url:
            return metadata.url
        return resource.absolute_path

    def _build_lightbox(self, target: LightboxTarget, options: _BuilderOptions) -> Optional[LightboxResult]:
        lightbox_resource, url = self.resolver.resolve_lightbox_target(target, self.valid_extensions)
        if lightbox_resource is None and url is None:
            logger.warning("No lightbox could be created for target %s", target)
            return None

        return self.studio.create_lightbox_image(
            lightbox_resource,
            url,
            options.lightbox_size,
            options.lightbox_group_identifier,
            options.lightbox_resize_options,
        )

    @staticmethod
    def _resolve_link_href(
        options: _BuilderOptions,
        metadata: Optional[Metadata],
        lightbox: Optional[LightboxResult],
        fullsize_url: Optional[str],
    ) -> Optional[str]:
        if options.link_href:
            return options.link_href
        if lightbox is not None:
            return lightbox.link_href
        if fullsize_url is not None:
            return fullsize_url
        if metadata is not None and metadata.url:
            return metadata.url
        return None
