"""Service layer for the remote copy of a club's data."""

from __future__ import annotations

import datetime
import json
import logging
from typing import TYPE_CHECKING, Any

from firebase_admin import firestore

from nosjoueurs.constants import (
    CLUBS_COLLECTION,
    EVENTS_COLLECTION,
    FIRESTORE_BATCH_LIMIT,
    META_COLLECTION,
    SETTINGS_DOCUMENT,
    VALIDATIONS_DOCUMENT,
)
from nosjoueurs.core.types import Event, StorageData, ValidationState

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.collection import CollectionReference
    from google.cloud.firestore_v1.document import DocumentReference

logger = logging.getLogger(__name__)


def _decode_payload(value: Any, default: Any) -> Any:
    """Accept both JSON strings and already-decoded maps."""
    if value is None:
        return default
    if isinstance(value, str):
        return json.loads(value)
    return value


class RemoteStore:
    """Firestore copy of each club's events, validations and settings.

    Layout, per club slug::

        clubs/{slug}/events/{eventId}   {"payload": <event JSON>, "syncedAt": ...}
        clubs/{slug}/meta/validations   {"payload": <validations JSON>}
        clubs/{slug}/meta/settings      {"currentEventId": ...}

    Every path is rooted at the slug, so one club can never read another's.
    """

    def __init__(self, db: Client | None = None) -> None:
        """Initialize the store."""
        self.db = db or firestore.client()

    def _events(self, slug: str) -> CollectionReference:
        return (
            self.db.collection(CLUBS_COLLECTION)
            .document(slug)
            .collection(EVENTS_COLLECTION)
        )

    def _meta(self, slug: str, name: str) -> DocumentReference:
        return (
            self.db.collection(CLUBS_COLLECTION)
            .document(slug)
            .collection(META_COLLECTION)
            .document(name)
        )

    def save_events(self, events: list[Event], slug: str) -> None:
        """Upsert each event by id; events absent from ``events`` are kept."""
        if not events:
            return

        synced_at = datetime.datetime.now(datetime.timezone.utc).isoformat()
        events_ref = self._events(slug)
        for start in range(0, len(events), FIRESTORE_BATCH_LIMIT):
            batch = self.db.batch()
            for event in events[start : start + FIRESTORE_BATCH_LIMIT]:
                batch.set(
                    events_ref.document(event["id"]),
                    {"payload": json.dumps(event), "syncedAt": synced_at},
                )
            batch.commit()

    def get_events(self, slug: str) -> list[Event]:
        """Return every stored event of the club, oldest first.

        Firestore streams documents in id order, so events are sorted on
        ``createdAt`` to match the order the club created them in.
        """
        events = []
        for doc in self._events(slug).stream():
            data = doc.to_dict() or {}
            event = _decode_payload(data.get("payload"), None)
            if event:
                events.append(event)
        events.sort(key=lambda event: event.get("createdAt") or "")
        return events

    def save_event(self, event: Event, slug: str) -> None:
        """Upsert a single event."""
        self.save_events([event], slug)

    def delete_event(self, event_id: str, slug: str) -> None:
        """Remove an event from the remote copy."""
        self._events(slug).document(event_id).delete()

    def save_validations(self, validations: ValidationState, slug: str) -> None:
        """Replace the stored validation flags."""
        self._meta(slug, VALIDATIONS_DOCUMENT).set(
            {"payload": json.dumps(validations)}
        )

    def get_validations(self, slug: str) -> ValidationState:
        doc = self._meta(slug, VALIDATIONS_DOCUMENT).get()
        if not doc.exists:
            return {}
        return _decode_payload((doc.to_dict() or {}).get("payload"), {})

    def save_current_event_id(self, event_id: str, slug: str) -> None:
        self._meta(slug, SETTINGS_DOCUMENT).set({"currentEventId": event_id})

    def get_current_event_id(self, slug: str) -> str:
        doc = self._meta(slug, SETTINGS_DOCUMENT).get()
        if not doc.exists:
            return ""
        return (doc.to_dict() or {}).get("currentEventId") or ""

    def save_storage_data(self, data: StorageData, slug: str) -> int:
        """Push a client document; return the number of events written.

        Validations are only written when non-empty and the current event id
        only when set, so a fresh device cannot blank the remote copy.
        """
        events = data.get("events") or []
        self.save_events(events, slug)

        validations = data.get("validations")
        if validations:
            self.save_validations(validations, slug)

        current_event_id = data.get("currentEventId")
        if current_event_id:
            self.save_current_event_id(current_event_id, slug)

        logger.info("Synced %d events for club %s", len(events), slug)
        return len(events)

    def get_storage_data(self, slug: str) -> StorageData:
        """Return the club's full remote document."""
        return {
            "events": self.get_events(slug),
            "validations": self.get_validations(slug),
            "currentEventId": self.get_current_event_id(slug),
        }
