# Path: core/files/validator.py
# Purpose: Validate and normalize unique identifiers of file records.
# Layer: core/files.
# Details: Accepts canonical textual UUIDs and their 16-byte binary representation.

from __future__ import annotations

import re
import uuid
from typing import Optional, Union

UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)


class UuidValidator:
    """Syntax check used to tell unique ids apart from numeric keys and paths."""

    def is_valid(self, value: object) -> bool:
        if isinstance(value, bytes):
            return len(value) == 16
        if isinstance(value, str):
            return UUID_PATTERN.match(value) is not None
        return False

    __call__ = is_valid


def uuid_to_string(value: Optional[Union[str, bytes]]) -> Optional[str]:
    """Return the canonical textual form of a textual or binary uuid."""

    if value is None:
        return None
    if isinstance(value, bytes):
        if len(value) != 16:
            return None
        return str(uuid.UUID(bytes=value))
    text = value.strip()
    if not text:
        return None
    if UUID_PATTERN.match(text):
        return text.lower()
    return text
