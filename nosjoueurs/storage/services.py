"""Service layer for a club's local data."""

from __future__ import annotations

import copy
import datetime
import json
import logging
import uuid

from nosjoueurs.core.types import Event, ExportedEvent, StorageData, ValidationState
from nosjoueurs.errors import NotFoundError, StorageError, ValidationError
from nosjoueurs.ffe.urls import is_valid_tournament_url

from . import share
from .backends import StorageBackend
from .club import get_storage_key_for_slug

logger = logging.getLogger(__name__)

MIN_EVENT_NAME_LENGTH = 3
MIN_TOURNAMENT_NAME_LENGTH = 2


def empty_data() -> StorageData:
    return {"currentEventId": "", "events": [], "validations": {}}


def round_key(round_number: int) -> str:
    """Return the validation key of a round."""
    return f"round_{round_number}"


class ClubStorage:
    """Events, tournaments and validation flags of one club.

    Every read and write goes through the club's own storage key, so two
    clubs sharing a backend never see each other's data.
    """

    def __init__(self, backend: StorageBackend, slug: str) -> None:
        """Initialize the storage for the club ``slug``."""
        self.backend = backend
        self.slug = slug
        self.key = get_storage_key_for_slug(slug)

    # Raw document

    def get_storage_data(self) -> StorageData:
        """Return the club's document, or an empty one if unreadable."""
        raw = self.backend.get_item(self.key)
        if not raw:
            return empty_data()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("Error reading %s: %s", self.key, e)
            return empty_data()
        return {**empty_data(), **data}

    def set_storage_data(self, data: StorageData) -> None:
        """Replace the club's document.

        Raises:
            StorageError: If the backend cannot write.
        """
        try:
            self.backend.set_item(self.key, json.dumps(data))
        except StorageError:
            raise
        except (OSError, TypeError, ValueError) as e:
            logger.error("Error writing %s: %s", self.key, e)
            raise StorageError() from e

    def clear_all_data(self) -> None:
        self.backend.remove_item(self.key)

    def export_data(self) -> str:
        return json.dumps(self.get_storage_data(), indent=2)

    def import_data(self, json_string: str) -> None:
        """Replace the whole document with a JSON export of it."""
        try:
            data = json.loads(json_string)
        except json.JSONDecodeError as e:
            raise ValidationError("Invalid data file") from e
        if not isinstance(data, dict) or not isinstance(data.get("events"), list):
            raise ValidationError("Invalid data file")
        self.set_storage_data({**empty_data(), **data})

    # Events

    def get_all_events(self) -> list[Event]:
        return self.get_storage_data()["events"]

    def get_event(self, event_id: str) -> Event | None:
        return next((e for e in self.get_all_events() if e["id"] == event_id), None)

    def check_event_exists(self, event_id: str) -> bool:
        return self.get_event(event_id) is not None

    def get_current_event(self) -> Event | None:
        data = self.get_storage_data()
        if not data["currentEventId"]:
            return None
        return next(
            (e for e in data["events"] if e["id"] == data["currentEventId"]), None
        )

    def set_current_event(self, event_id: str) -> None:
        data = self.get_storage_data()
        if not any(e["id"] == event_id for e in data["events"]):
            raise NotFoundError(f"Event with id {event_id} not found")
        data["currentEventId"] = event_id
        self.set_storage_data(data)

    def save_event(self, event: Event) -> None:
        """Upsert ``event`` by id and make it the current event."""
        data = self.get_storage_data()
        event = copy.deepcopy(event)
        for index, existing in enumerate(data["events"]):
            if existing["id"] == event["id"]:
                data["events"][index] = event
                break
        else:
            data["events"].append(event)
        data["currentEventId"] = event["id"]
        self.set_storage_data(data)

    def create_event(self, name: str, tournaments: list[dict]) -> Event:
        """Create and save an event from a name and (name, url) tournaments.

        Raises:
            ValidationError: If the event or any tournament is invalid.
        """
        if not name or len(name.strip()) < MIN_EVENT_NAME_LENGTH:
            raise ValidationError(
                f"Event name must be at least {MIN_EVENT_NAME_LENGTH} characters"
            )
        if not tournaments:
            raise ValidationError("An event needs at least one tournament")

        for tournament in tournaments:
            t_name = (tournament.get("name") or "").strip()
            if len(t_name) < MIN_TOURNAMENT_NAME_LENGTH:
                raise ValidationError(
                    "Tournament name must be at least "
                    f"{MIN_TOURNAMENT_NAME_LENGTH} characters"
                )
            if not is_valid_tournament_url(tournament.get("url") or ""):
                raise ValidationError(f"Invalid FFE URL for tournament {t_name}")

        event: Event = {
            "id": f"event_{uuid.uuid4()}",
            "name": name.strip(),
            "createdAt": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            "tournaments": [
                {
                    "id": f"tournament_{uuid.uuid4()}",
                    "name": t["name"].strip(),
                    "url": t["url"].strip(),
                    "lastUpdate": "",
                    "players": [],
                }
                for t in tournaments
            ],
        }
        self.save_event(event)
        return event

    def delete_event(self, event_id: str) -> None:
        """Delete an event together with the validations of its tournaments."""
        data = self.get_storage_data()
        event = next((e for e in data["events"] if e["id"] == event_id), None)
        data["events"] = [e for e in data["events"] if e["id"] != event_id]

        if data["currentEventId"] == event_id:
            data["currentEventId"] = data["events"][0]["id"] if data["events"] else ""

        if event is not None:
            for tournament in event["tournaments"]:
                data["validations"].pop(tournament["id"], None)

        self.set_storage_data(data)

    # Validations

    def get_validation_state(self) -> ValidationState:
        return self.get_storage_data()["validations"]

    def get_validation(
        self, tournament_id: str, player_name: str, round_number: int
    ) -> bool:
        """Return a round's flag; missing entries read as False."""
        validations = self.get_validation_state()
        return bool(
            validations.get(tournament_id, {})
            .get(player_name, {})
            .get(round_key(round_number), False)
        )

    def set_validation(
        self, tournament_id: str, player_name: str, round_number: int, is_valid: bool
    ) -> None:
        data = self.get_storage_data()
        player_flags = data["validations"].setdefault(tournament_id, {}).setdefault(
            player_name, {}
        )
        player_flags[round_key(round_number)] = is_valid
        self.set_storage_data(data)

    def clear_validation(
        self, tournament_id: str, player_name: str, round_number: int
    ) -> None:
        data = self.get_storage_data()
        player_flags = data["validations"].get(tournament_id, {}).get(player_name)
        if player_flags is None or round_key(round_number) not in player_flags:
            return
        del player_flags[round_key(round_number)]
        self.set_storage_data(data)

    def clear_tournament_validations(self, tournament_id: str) -> None:
        data = self.get_storage_data()
        if data["validations"].pop(tournament_id, None) is not None:
            self.set_storage_data(data)

    # Export, import and sharing

    def export_event(
        self, event_id: str, include_validations: bool = True
    ) -> ExportedEvent | None:
        return share.export_event(
            self.get_storage_data(), event_id, include_validations
        )

    def import_event(
        self,
        exported: ExportedEvent,
        replace_if_exists: bool = False,
        generate_new_id: bool = False,
    ) -> share.ImportResult:
        """Import an export envelope; see :func:`share.import_event`."""
        data = self.get_storage_data()
        result = share.import_event(
            data,
            exported,
            replace_if_exists=replace_if_exists,
            generate_new_id=generate_new_id,
        )
        if result.success:
            self.set_storage_data(data)
        return result

    def encode_event(self, event_id: str) -> str | None:
        """Return the compressed form of an event, without its validations."""
        exported = self.export_event(event_id, include_validations=False)
        if exported is None:
            return None
        return share.encode_envelope(exported)

    def generate_share_url(
        self, event_id: str, base_url: str
    ) -> share.ShareLink | None:
        """Build a link carrying the event.

        Validations are not part of the link, which callers should tell the
        user. Check ``fits_qr_code`` before rendering a QR code.
        """
        encoded = self.encode_event(event_id)
        if encoded is None:
            return None
        return share.build_share_url(base_url, encoded)
