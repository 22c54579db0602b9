"""Tests for the events blueprint using mockfirestore."""

from __future__ import annotations

import json
import unittest
from unittest.mock import patch

from google.api_core import exceptions as google_exceptions

from nosjoueurs import create_app
from nosjoueurs.auth.utils import generate_sync_token
from nosjoueurs.constants import DEFAULT_SYNC_SECRET
from nosjoueurs.events.services import RemoteStore
from tests.helpers import make_event
from tests.mock_utils import make_firestore_module, make_mock_db

SLUG = "hay-chess"


def _token(slug=SLUG):
    return {"X-Sync-Token": generate_sync_token(slug, DEFAULT_SYNC_SECRET)}


class EventsRoutesFirebaseTestCase(unittest.TestCase):
    """Test case for the sync and fetch endpoints."""

    def setUp(self) -> None:
        """Set up a test client and patch firestore.client()."""
        self.mock_db = make_mock_db()
        patcher = patch(
            "nosjoueurs.events.routes.firestore",
            new=make_firestore_module(self.mock_db),
        )
        patcher.start()
        self.addCleanup(patcher.stop)

        self.app = create_app({"TESTING": True, "EVENTS_RATE_LIMIT": 100})
        self.client = self.app.test_client()

    def _sync(self, body, headers=None):
        return self.client.post(
            "/api/events/sync",
            json=body,
            headers=headers if headers is not None else _token(),
        )

    def test_sync_stores_events(self) -> None:
        events = [make_event("e1"), make_event("e2", name="Rapide de Nice")]
        response = self._sync(
            {
                "clubSlug": SLUG,
                "events": events,
                "validations": {"t1": {"BACHKAT FARES": {"round_1": True}}},
                "currentEventId": "e2",
            }
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {"success": True, "synced": 2})

        stored = RemoteStore(self.mock_db).get_storage_data(SLUG)
        self.assertEqual(sorted(e["id"] for e in stored["events"]), ["e1", "e2"])
        self.assertEqual(stored["currentEventId"], "e2")
        self.assertTrue(stored["validations"]["t1"]["BACHKAT FARES"]["round_1"])

    def test_sync_then_fetch(self) -> None:
        event = make_event("e1")
        self._sync({"clubSlug": SLUG, "events": [event], "currentEventId": "e1"})

        response = self.client.get(
            f"/api/events/fetch?clubSlug={SLUG}", headers=_token()
        )

        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertTrue(body["success"])
        self.assertEqual(body["data"]["events"], [event])
        self.assertEqual(body["data"]["validations"], {})
        self.assertEqual(body["data"]["currentEventId"], "e1")

    def test_fetch_is_scoped_to_slug(self) -> None:
        self._sync({"clubSlug": SLUG, "events": [make_event("e1")]})

        response = self.client.get(
            "/api/events/fetch?clubSlug=other-club", headers=_token("other-club")
        )

        self.assertEqual(response.get_json()["data"]["events"], [])

    def test_fetch_empty_club(self) -> None:
        response = self.client.get(
            f"/api/events/fetch?clubSlug={SLUG}", headers=_token()
        )
        self.assertEqual(
            response.get_json()["data"],
            {"events": [], "validations": {}, "currentEventId": ""},
        )

    def test_invalid_slug(self) -> None:
        for slug in (None, "", "Hay Chess", "a" * 41):
            with self.subTest(slug=slug):
                response = self._sync({"clubSlug": slug, "events": []})
                self.assertEqual(response.status_code, 400)

    def test_missing_token(self) -> None:
        response = self._sync({"clubSlug": SLUG, "events": []}, headers={})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(self.mock_db.batch.call_count, 0)

    def test_token_for_another_club(self) -> None:
        response = self._sync(
            {"clubSlug": SLUG, "events": [make_event()]}, headers=_token("club-b")
        )
        self.assertEqual(response.status_code, 401)

    def test_slug_is_checked_before_token(self) -> None:
        response = self._sync({"clubSlug": "BAD SLUG", "events": []}, headers={})
        self.assertEqual(response.status_code, 400)

    def test_events_must_be_a_list(self) -> None:
        response = self._sync({"clubSlug": SLUG, "events": {"id": "e1"}})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["error"], "Invalid events data")

    def test_events_need_ids(self) -> None:
        response = self._sync({"clubSlug": SLUG, "events": [{"name": "x"}]})
        self.assertEqual(response.status_code, 400)

    def test_validations_must_be_an_object(self) -> None:
        response = self._sync({"clubSlug": SLUG, "events": [], "validations": []})
        self.assertEqual(response.status_code, 400)

    def test_fetch_requires_token(self) -> None:
        response = self.client.get(f"/api/events/fetch?clubSlug={SLUG}")
        self.assertEqual(response.status_code, 401)

    def test_store_failure_is_a_500(self) -> None:
        with patch.object(
            RemoteStore,
            "get_storage_data",
            side_effect=google_exceptions.ServiceUnavailable("down"),
        ):
            response = self.client.get(
                f"/api/events/fetch?clubSlug={SLUG}", headers=_token()
            )

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.get_json()["error"], "Internal server error")

    def test_preflight(self) -> None:
        for path in ("/api/events/sync", "/api/events/fetch"):
            with self.subTest(path=path):
                response = self.client.options(path)
                self.assertEqual(response.status_code, 200)
                self.assertIn(
                    "X-Sync-Token", response.headers["Access-Control-Allow-Headers"]
                )

    def test_payload_is_stored_as_json(self) -> None:
        self._sync({"clubSlug": SLUG, "events": [make_event("e1")]})

        doc = (
            self.mock_db.collection("clubs")
            .document(SLUG)
            .collection("events")
            .document("e1")
            .get()
        )
        self.assertEqual(json.loads(doc.to_dict()["payload"])["id"], "e1")
        self.assertIn("syncedAt", doc.to_dict())


if __name__ == "__main__":
    unittest.main()
