# Path: core/studio/metadata.py
# Purpose: Derive presentation metadata from the locale-keyed blob stored on file records.
# Layer: core/studio.
# Details: Walks a locale fallback chain and fills every field independently.

from __future__ import annotations

import json
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from core.files.validator import uuid_to_string
from core.models.domain import FileRecord, LocaleContext, Metadata

logger = logging.getLogger(__name__)

DEFAULT_META_FIELDS = (Metadata.VALUE_TITLE, Metadata.VALUE_ALT, Metadata.VALUE_URL, Metadata.VALUE_CAPTION)


def locale_chain(requested: Optional[str], context: Optional[LocaleContext]) -> List[str]:
    """Return the requested locale followed by the page locale and its fallback, without duplicates."""

    candidates = [requested]
    if context is not None:
        candidates.extend([context.page_locale, context.page_fallback_locale])

    chain: List[str] = []
    for locale in candidates:
        if locale and locale not in chain:
            chain.append(locale)
    return chain


def load_meta_blob(record: FileRecord) -> Dict[str, Mapping]:
    """Return the record's metadata keyed by locale; malformed blobs count as empty."""

    raw = record.meta
    if not raw:
        return {}
    if isinstance(raw, Mapping):
        payload = raw
    else:
        try:
            payload = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Ignoring unreadable metadata of file record %s", record.id)
            return {}
    if not isinstance(payload, Mapping):
        return {}
    return {str(locale): values for locale, values in payload.items() if isinstance(values, Mapping)}


def derive_metadata(
    record: FileRecord,
    locales: Sequence[str],
    meta_fields: Iterable[str] = DEFAULT_META_FIELDS,
) -> Metadata:
    """
    Build metadata for a record.

    Every field starts empty and takes the first non-empty value found while
    walking ``locales`` in order. Unknown keys of matching locales are kept.
    """

    values: Dict[str, str] = {field: "" for field in meta_fields}
    blob = load_meta_blob(record)

    for locale in locales:
        data = blob.get(locale)
        if data is None:
            continue
        for key, value in data.items():
            if value is None or value == "":
                values.setdefault(str(key), "")
                continue
            if not values.get(str(key)):
                values[str(key)] = str(value)

    record_uuid = uuid_to_string(record.uuid)
    if record_uuid:
        values[Metadata.VALUE_UUID] = record_uuid
    return Metadata(values)


def with_record_uuid(metadata: Metadata, record: Optional[FileRecord]) -> Metadata:
    """Add the record's uuid to explicitly defined metadata unless it already carries one."""

    if record is None or metadata.has(Metadata.VALUE_UUID):
        return metadata
    record_uuid = uuid_to_string(record.uuid)
    if not record_uuid:
        return metadata
    return metadata.with_values(**{Metadata.VALUE_UUID: record_uuid})
