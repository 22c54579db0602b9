"""HTTP client for the remote sync endpoints."""

from __future__ import annotations

import logging

import requests

from nosjoueurs.auth.utils import generate_sync_token
from nosjoueurs.constants import DEFAULT_SYNC_SECRET, SYNC_TOKEN_HEADER
from nosjoueurs.storage.services import ClubStorage

from .merge import merge_storage_data

logger = logging.getLogger(__name__)

SYNC_TIMEOUT = 15


def _is_storage_data(value: object) -> bool:
    """Return True when ``value`` has the shape of a club document."""
    if not isinstance(value, dict) or not isinstance(value.get("events"), list):
        return False
    if not isinstance(value.get("validations") or {}, dict):
        return False
    return all(isinstance(event, dict) and "id" in event for event in value["events"])


class SyncClient:
    """Push a club's local document to the server, or pull and merge it back.

    Sync is on demand. Both calls report failure by returning False and
    logging, so a flaky network never breaks the caller.
    """

    def __init__(
        self,
        base_url: str,
        secret: str = DEFAULT_SYNC_SECRET,
        session: requests.Session | None = None,
        timeout: float = SYNC_TIMEOUT,
    ) -> None:
        """Initialize the client."""
        self.base_url = base_url.rstrip("/")
        self.secret = secret
        self.session = session or requests.Session()
        self.timeout = timeout

    def _headers(self, slug: str) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            SYNC_TOKEN_HEADER: generate_sync_token(slug, self.secret),
        }

    def push(self, storage: ClubStorage) -> bool:
        """Send the club's events, validations and current event id."""
        data = storage.get_storage_data()
        logger.info(
            "Uploading club %s: %d events, %d validated tournaments",
            storage.slug,
            len(data["events"]),
            len(data["validations"]),
        )
        try:
            response = self.session.post(
                f"{self.base_url}/api/events/sync",
                json={**data, "clubSlug": storage.slug},
                headers=self._headers(storage.slug),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Upload error for club %s: %s", storage.slug, e)
            return False

        if not response.ok:
            logger.error(
                "Upload failed for club %s: %s", storage.slug, response.status_code
            )
            return False

        try:
            synced = response.json().get("synced")
        except (ValueError, AttributeError):
            synced = None
        logger.info("Upload successful: %s events synced", synced)
        return True

    def pull(self, storage: ClubStorage) -> bool:
        """Fetch the remote copy and merge it into the local document."""
        try:
            response = self.session.get(
                f"{self.base_url}/api/events/fetch",
                params={"clubSlug": storage.slug},
                headers=self._headers(storage.slug),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Download error for club %s: %s", storage.slug, e)
            return False

        if not response.ok:
            logger.error(
                "Download failed for club %s: %s", storage.slug, response.status_code
            )
            return False

        try:
            remote = response.json()["data"]
        except (ValueError, KeyError, TypeError) as e:
            logger.error(
                "Unreadable sync response for club %s: %s", storage.slug, e
            )
            return False

        if not _is_storage_data(remote):
            logger.error("Malformed sync data for club %s", storage.slug)
            return False

        merged = merge_storage_data(storage.get_storage_data(), remote)
        storage.set_storage_data(merged)
        logger.info(
            "Download successful: %d events after merge", len(merged["events"])
        )
        return True
