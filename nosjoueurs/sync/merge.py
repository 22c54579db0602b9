"""Union merge of a remote club document into the local one."""

from __future__ import annotations

import copy

from nosjoueurs.core.types import StorageData


def merge_storage_data(local: StorageData, remote: StorageData) -> StorageData:
    """Merge ``remote`` into ``local`` without losing local-only records.

    * Events: every remote event, then local events whose id is not remote.
      On a shared id the remote version is kept.
    * Validations: union by tournament id; local wins on a shared id.
    * Current event: remote when set, else local.

    There are no per-record timestamps: a stale local edit can win over a
    newer remote one, and a newer local edit of a shared event is replaced
    by the remote version.
    """
    remote_events = list(remote.get("events") or [])
    remote_ids = {event["id"] for event in remote_events}
    merged_events = remote_events + [
        event for event in local.get("events") or [] if event["id"] not in remote_ids
    ]

    merged_validations = {
        **(remote.get("validations") or {}),
        **(local.get("validations") or {}),
    }

    return copy.deepcopy(
        {
            "events": merged_events,
            "validations": merged_validations,
            "currentEventId": remote.get("currentEventId")
            or local.get("currentEventId")
            or "",
        }
    )
