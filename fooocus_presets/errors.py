"""Exception types raised by the preset store.

Every failure carries a single message suitable for direct display; callers
usually just show ``str(e)``.
"""
from __future__ import annotations


class PresetStoreError(Exception):
    """Root for all fooocus_presets errors."""


class StorageInitError(PresetStoreError):
    """Data directory or database file unusable. Not recoverable."""


class DatabaseNotInitializedError(PresetStoreError):
    """An operation ran before init_db()."""


class StoreError(PresetStoreError):
    """A database operation failed (I/O, constraint, bad parameter)."""


class PresetFormatError(PresetStoreError):
    """A Fooocus preset file could not be parsed."""
