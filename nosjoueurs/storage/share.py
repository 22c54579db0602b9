"""Export, import and link sharing of single events."""

from __future__ import annotations

import base64
import binascii
import copy
import datetime
import json
import logging
import uuid
import zlib
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qs, urlsplit

from nosjoueurs.constants import (
    EXPORT_VERSION,
    QR_CODE_MAX_URL_SIZE,
    SHARE_QUERY_PARAM,
)
from nosjoueurs.core.types import Event, ExportedEvent, StorageData, ValidationState
from nosjoueurs.errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """Outcome of importing an exported event."""

    success: bool
    event_id: str
    is_duplicate: bool


@dataclass
class ShareLink:
    """A shareable URL and its length."""

    url: str
    size: int

    @property
    def fits_qr_code(self) -> bool:
        """Return False when the link is too long to scan as a QR code.

        Callers must then fall back to a file export.
        """
        return self.size <= QR_CODE_MAX_URL_SIZE


def _now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def export_event(
    data: StorageData, event_id: str, include_validations: bool = True
) -> ExportedEvent | None:
    """Wrap one event, and optionally its validations, in an export envelope."""
    event = next((e for e in data["events"] if e["id"] == event_id), None)
    if event is None:
        return None

    validations: ValidationState = {}
    if include_validations:
        for tournament in event["tournaments"]:
            if tournament["id"] in data["validations"]:
                validations[tournament["id"]] = data["validations"][tournament["id"]]

    return copy.deepcopy(
        {
            "version": EXPORT_VERSION,
            "exportDate": _now_iso(),
            "event": event,
            "validations": validations,
        }
    )


def validate_envelope(exported: Any) -> ExportedEvent:
    """Check the shape of an export envelope before it touches the store."""
    if not isinstance(exported, dict) or not exported.get("version"):
        raise ValidationError("Invalid export file: missing version")

    event = exported.get("event")
    if (
        not isinstance(event, dict)
        or not isinstance(event.get("id"), str)
        or not isinstance(event.get("tournaments"), list)
    ):
        raise ValidationError("Invalid export file: missing event")

    if not isinstance(exported.get("validations", {}), dict):
        raise ValidationError("Invalid export file: bad validations")
    return exported


def _copy_with_new_ids(event: Event) -> Event:
    duplicate = copy.deepcopy(event)
    duplicate["id"] = f"event_{uuid.uuid4()}"
    duplicate["name"] = f"{event['name']} (copy)"
    for tournament in duplicate["tournaments"]:
        tournament["id"] = f"tournament_{uuid.uuid4()}"
    return duplicate


def import_event(
    data: StorageData,
    exported: ExportedEvent,
    replace_if_exists: bool = False,
    generate_new_id: bool = False,
) -> ImportResult:
    """Merge an exported event into ``data`` in place.

    When the event id already exists, ``replace_if_exists`` overwrites it and
    ``generate_new_id`` keeps both by giving the import fresh event and
    tournament ids. With neither, nothing changes and the result reports the
    duplicate. Imported validations follow their tournaments' new ids.
    """
    exported = validate_envelope(exported)
    event = copy.deepcopy(exported["event"])
    validations = copy.deepcopy(exported.get("validations") or {})

    existing_index = next(
        (i for i, e in enumerate(data["events"]) if e["id"] == event["id"]), None
    )
    is_duplicate = existing_index is not None
    final_event = event

    if is_duplicate:
        if replace_if_exists:
            data["events"][existing_index] = final_event
        elif generate_new_id:
            final_event = _copy_with_new_ids(event)
            data["events"].append(final_event)
        else:
            return ImportResult(False, event["id"], True)
    else:
        data["events"].append(final_event)

    renamed = is_duplicate and not replace_if_exists
    id_map = {
        old["id"]: new["id"]
        for old, new in zip(event["tournaments"], final_event["tournaments"])
    }
    for tournament_id, tournament_validations in validations.items():
        if renamed:
            if tournament_id not in id_map:
                continue
            tournament_id = id_map[tournament_id]
        data["validations"][tournament_id] = tournament_validations

    data["currentEventId"] = final_event["id"]
    return ImportResult(True, final_event["id"], is_duplicate)


def encode_envelope(exported: ExportedEvent) -> str:
    """Compress an envelope into a URL-safe string."""
    raw = json.dumps(exported, separators=(",", ":"), ensure_ascii=False)
    compressed = zlib.compress(raw.encode("utf-8"), 9)
    return base64.urlsafe_b64encode(compressed).decode("ascii").rstrip("=")


def decode_event_from_url(encoded: str) -> ExportedEvent | None:
    """Decode a shared envelope; return None for anything malformed."""
    if not encoded:
        return None
    try:
        padded = encoded + "=" * (-len(encoded) % 4)
        compressed = base64.urlsafe_b64decode(padded.encode("ascii"))
        exported = json.loads(zlib.decompress(compressed).decode("utf-8"))
        return validate_envelope(exported)
    except (
        binascii.Error,
        zlib.error,
        UnicodeError,
        ValueError,
        ValidationError,
    ) as e:
        logger.warning("Could not decode shared event: %s", e)
        return None


def build_share_url(base_url: str, encoded: str) -> ShareLink:
    url = f"{base_url}?{SHARE_QUERY_PARAM}={encoded}"
    return ShareLink(url=url, size=len(url))


def get_share_param(url: str) -> str | None:
    """Return the encoded event carried by a share URL, if any."""
    values = parse_qs(urlsplit(url).query).get(SHARE_QUERY_PARAM)
    return values[0] if values else None
