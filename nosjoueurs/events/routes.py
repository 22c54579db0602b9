"""Routes for the events blueprint."""

from firebase_admin import firestore
from flask import current_app, g, jsonify, request
from google.api_core import exceptions as google_exceptions

from nosjoueurs.auth.decorators import sync_token_required
from nosjoueurs.errors import AppError, ValidationError
from nosjoueurs.utils import get_json_body, preflight_response

from . import bp
from .services import RemoteStore


def _validate_events(events):
    if not isinstance(events, list):
        raise ValidationError("Invalid events data")
    for event in events:
        if not isinstance(event, dict) or not isinstance(event.get("id"), str):
            raise ValidationError("Invalid events data")
    return events


@bp.route("/sync", methods=["POST"], provide_automatic_options=False)
@sync_token_required
def sync_events():
    """Store the client's events, validations and current event id."""
    body = get_json_body(request)
    events = _validate_events(body.get("events"))

    validations = body.get("validations")
    if validations is not None and not isinstance(validations, dict):
        raise ValidationError("Invalid validations data")

    current_event_id = body.get("currentEventId")
    if current_event_id is not None and not isinstance(current_event_id, str):
        raise ValidationError("Invalid currentEventId")

    current_app.logger.info(
        f"Sync request for {g.club_slug}: {len(events)} events, "
        f"{len(validations or {})} validated tournaments"
    )

    store = RemoteStore(firestore.client())
    try:
        synced = store.save_storage_data(
            {
                "events": events,
                "validations": validations or {},
                "currentEventId": current_event_id or "",
            },
            g.club_slug,
        )
    except google_exceptions.GoogleAPICallError as e:
        current_app.logger.error(f"Error syncing club {g.club_slug}: {e}")
        raise AppError("Internal server error", 500) from e

    return jsonify({"success": True, "synced": synced})


@bp.route("/fetch", methods=["GET"], provide_automatic_options=False)
@sync_token_required
def fetch_events():
    """Return the remote copy of the club's data."""
    store = RemoteStore(firestore.client())
    try:
        data = store.get_storage_data(g.club_slug)
    except google_exceptions.GoogleAPICallError as e:
        current_app.logger.error(f"Error fetching club {g.club_slug}: {e}")
        raise AppError("Internal server error", 500) from e

    return jsonify({"success": True, "data": data})


@bp.route("/sync", methods=["OPTIONS"])
@bp.route("/fetch", methods=["OPTIONS"])
def events_preflight():
    """Answer the CORS preflight."""
    return preflight_response()
