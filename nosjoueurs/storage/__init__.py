"""Client-side storage, namespaced per club."""

from .backends import FileBackend, MemoryBackend, StorageBackend
from .club import (
    clear_club_identity,
    get_club_identity,
    get_storage_key_for_slug,
    migrate_legacy_data,
    set_club_identity,
    slugify_club_name,
)
from .services import ClubStorage

__all__ = [
    "ClubStorage",
    "FileBackend",
    "MemoryBackend",
    "StorageBackend",
    "clear_club_identity",
    "get_club_identity",
    "get_storage_key_for_slug",
    "migrate_legacy_data",
    "set_club_identity",
    "slugify_club_name",
]
