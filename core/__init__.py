# Path: core/__init__.py
# Purpose: Package initializer for core application layer.
# Layer: core.
# Details: Aggregates subpackages for domain models, file records, and figure building.
