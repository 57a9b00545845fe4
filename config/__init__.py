# Path: config/__init__.py
# Purpose: Package initializer for configuration module.
# Layer: config.
# Details: Exposes the settings model used by the studio and its scripts.

from .settings import StudioSettings

__all__ = ["StudioSettings"]
