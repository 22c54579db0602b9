"""Club identity and the slug that namespaces all of a club's data."""

from __future__ import annotations

import datetime
import json
import logging
import re
import unicodedata

from nosjoueurs.constants import (
    CLUB_IDENTITY_KEY,
    CLUB_SLUG_MAX_LENGTH,
    LEGACY_STORAGE_KEY,
    STORAGE_KEY,
)
from nosjoueurs.core.types import ClubIdentity
from nosjoueurs.errors import ValidationError

from .backends import StorageBackend

logger = logging.getLogger(__name__)

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def slugify_club_name(name: str) -> str:
    """Turn a club display name into its storage namespace.

    Deterministic, so two devices typing the same club name end up in the
    same namespace without talking to each other.

    >>> slugify_club_name("Échiquier Nîmois")
    'echiquier-nimois'

    Raises:
        ValidationError: If nothing usable is left, e.g. for a blank name or
            one written only in symbols or a non-Latin script.
    """
    trimmed = (name or "").strip()
    if not trimmed:
        raise ValidationError("Club name cannot be empty")

    decomposed = unicodedata.normalize("NFD", trimmed)
    ascii_only = "".join(c for c in decomposed if not unicodedata.combining(c))
    slug = _NON_ALNUM_RE.sub("-", ascii_only.lower()).strip("-")
    slug = slug[:CLUB_SLUG_MAX_LENGTH].rstrip("-")

    if not slug:
        raise ValidationError("Club name cannot be empty")
    return slug


def get_storage_key_for_slug(slug: str) -> str:
    """Return the storage key holding a club's data."""
    return f"{STORAGE_KEY}:{slug}"


def get_club_identity(backend: StorageBackend) -> ClubIdentity | None:
    """Return the club this device is bound to, if any."""
    raw = backend.get_item(CLUB_IDENTITY_KEY)
    if not raw:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Ignoring unreadable club identity")
        return None


def set_club_identity(backend: StorageBackend, club_name: str) -> ClubIdentity:
    """Bind this device to ``club_name``."""
    identity: ClubIdentity = {
        "clubName": club_name,
        "clubSlug": slugify_club_name(club_name),
        "createdAt": datetime.datetime.now(datetime.timezone.utc).isoformat(),
    }
    backend.set_item(CLUB_IDENTITY_KEY, json.dumps(identity))
    return identity


def clear_club_identity(backend: StorageBackend) -> None:
    """Return the device to the unbound state. Club data is kept."""
    backend.remove_item(CLUB_IDENTITY_KEY)


def migrate_legacy_data(backend: StorageBackend, slug: str) -> bool:
    """Copy data saved before namespacing into the club's namespace.

    The legacy key is left untouched, and nothing happens when the club
    already has data. Returns True when a copy was made.
    """
    legacy = backend.get_item(LEGACY_STORAGE_KEY)
    if not legacy:
        return False

    key = get_storage_key_for_slug(slug)
    if backend.get_item(key):
        return False

    backend.set_item(key, legacy)
    logger.info("Migrated legacy data to %s", key)
    return True
