"""Tests for the Firestore remote store."""

from __future__ import annotations

import unittest
from unittest.mock import patch

from nosjoueurs.events.services import RemoteStore
from tests.helpers import make_event, make_storage_data
from tests.mock_utils import make_mock_db

SLUG = "hay-chess"


class RemoteStoreTestCase(unittest.TestCase):
    """Test case for RemoteStore."""

    def setUp(self) -> None:
        self.db = make_mock_db()
        self.store = RemoteStore(self.db)

    def test_save_and_get_events(self) -> None:
        self.store.save_events([make_event("e1"), make_event("e2")], SLUG)
        self.assertEqual(
            sorted(e["id"] for e in self.store.get_events(SLUG)), ["e1", "e2"]
        )

    def test_events_come_back_in_creation_order(self) -> None:
        self.store.save_events(
            [
                make_event("zz-first", createdAt="2026-01-01T08:00:00+00:00"),
                make_event("aa-second", createdAt="2026-02-01T08:00:00+00:00"),
                make_event("mm-third", createdAt="2026-03-01T08:00:00+00:00"),
            ],
            SLUG,
        )
        self.assertEqual(
            [e["id"] for e in self.store.get_events(SLUG)],
            ["zz-first", "aa-second", "mm-third"],
        )

    def test_save_event_upserts(self) -> None:
        self.store.save_event(make_event("e1", name="Before"), SLUG)
        self.store.save_event(make_event("e1", name="After"), SLUG)

        events = self.store.get_events(SLUG)
        self.assertEqual(len(events), 1)
        self.assertEqual(events[0]["name"], "After")

    def test_save_events_keeps_absent_events(self) -> None:
        self.store.save_events([make_event("e1")], SLUG)
        self.store.save_events([make_event("e2")], SLUG)
        self.assertEqual(len(self.store.get_events(SLUG)), 2)

    def test_delete_event(self) -> None:
        self.store.save_events([make_event("e1"), make_event("e2")], SLUG)
        self.store.delete_event("e1", SLUG)
        self.assertEqual([e["id"] for e in self.store.get_events(SLUG)], ["e2"])

    def test_large_saves_are_chunked(self) -> None:
        events = [make_event(f"e{i}") for i in range(5)]
        with patch("nosjoueurs.events.services.FIRESTORE_BATCH_LIMIT", 2):
            self.store.save_events(events, SLUG)

        self.assertEqual(self.db.batch.call_count, 3)
        self.assertEqual(len(self.store.get_events(SLUG)), 5)

    def test_empty_save_does_nothing(self) -> None:
        self.store.save_events([], SLUG)
        self.assertEqual(self.db.batch.call_count, 0)

    def test_validations_and_current_event(self) -> None:
        validations = {"t1": {"BACHKAT FARES": {"round_1": True, "round_2": False}}}
        self.store.save_validations(validations, SLUG)
        self.store.save_current_event_id("e1", SLUG)

        self.assertEqual(self.store.get_validations(SLUG), validations)
        self.assertEqual(self.store.get_current_event_id(SLUG), "e1")

    def test_missing_meta_documents(self) -> None:
        self.assertEqual(self.store.get_validations(SLUG), {})
        self.assertEqual(self.store.get_current_event_id(SLUG), "")

    def test_save_storage_data_does_not_blank_remote(self) -> None:
        """Test that empty validations and an unset current id are not written."""
        self.store.save_validations({"t1": {"P": {"round_1": True}}}, SLUG)
        self.store.save_current_event_id("e1", SLUG)

        synced = self.store.save_storage_data(
            make_storage_data(events=[make_event("e2")]), SLUG
        )

        self.assertEqual(synced, 1)
        data = self.store.get_storage_data(SLUG)
        self.assertEqual(data["validations"], {"t1": {"P": {"round_1": True}}})
        self.assertEqual(data["currentEventId"], "e1")

    def test_clubs_are_isolated(self) -> None:
        self.store.save_storage_data(
            make_storage_data(
                events=[make_event("e1")],
                validations={"t1": {"P": {"round_1": True}}},
                current_event_id="e1",
            ),
            SLUG,
        )
        self.assertEqual(
            self.store.get_storage_data("other-club"),
            {"events": [], "validations": {}, "currentEventId": ""},
        )

    def test_accepts_decoded_payloads(self) -> None:
        """Test that documents written as maps instead of JSON still load."""
        (
            self.db.collection("clubs")
            .document(SLUG)
            .collection("events")
            .document("e9")
            .set({"payload": make_event("e9")})
        )
        self.assertEqual([e["id"] for e in self.store.get_events(SLUG)], ["e9"])


if __name__ == "__main__":
    unittest.main()
