"""Tests for the pull merge."""

import unittest

from nosjoueurs.sync import merge_storage_data
from tests.helpers import make_event, make_storage_data


class MergeStorageDataTestCase(unittest.TestCase):
    """Test case for merge_storage_data."""

    def test_union_of_events(self):
        local = make_storage_data(events=[make_event("L1")])
        remote = make_storage_data(events=[make_event("R1")])

        merged = merge_storage_data(local, remote)

        self.assertEqual([e["id"] for e in merged["events"]], ["R1", "L1"])

    def test_remote_version_of_shared_event_wins(self):
        local = make_storage_data(events=[make_event("E1", name="Local name")])
        remote = make_storage_data(events=[make_event("E1", name="Remote name")])

        merged = merge_storage_data(local, remote)

        self.assertEqual(len(merged["events"]), 1)
        self.assertEqual(merged["events"][0]["name"], "Remote name")

    def test_validations_local_wins_on_conflict(self):
        local = make_storage_data(
            validations={
                "t1": {"P": {"round_1": True}},
                "t2": {"Q": {"round_1": True}},
            }
        )
        remote = make_storage_data(
            validations={
                "t1": {"P": {"round_1": False}},
                "t3": {"R": {"round_2": True}},
            }
        )

        merged = merge_storage_data(local, remote)

        self.assertEqual(
            merged["validations"],
            {
                "t1": {"P": {"round_1": True}},
                "t2": {"Q": {"round_1": True}},
                "t3": {"R": {"round_2": True}},
            },
        )

    def test_current_event_prefers_remote(self):
        self.assertEqual(
            merge_storage_data(
                make_storage_data(current_event_id="L1"),
                make_storage_data(current_event_id="R1"),
            )["currentEventId"],
            "R1",
        )
        self.assertEqual(
            merge_storage_data(
                make_storage_data(current_event_id="L1"), make_storage_data()
            )["currentEventId"],
            "L1",
        )

    def test_empty_remote_keeps_local(self):
        local = make_storage_data(
            events=[make_event("L1")],
            validations={"t1": {"P": {"round_1": True}}},
            current_event_id="L1",
        )
        self.assertEqual(merge_storage_data(local, make_storage_data()), local)

    def test_inputs_are_not_mutated(self):
        local = make_storage_data(events=[make_event("L1")])
        remote = make_storage_data(events=[make_event("R1")])

        merged = merge_storage_data(local, remote)
        merged["events"][0]["name"] = "changed"

        self.assertEqual(remote["events"][0]["name"], "Open de Marseille")
        self.assertEqual(len(local["events"]), 1)


if __name__ == "__main__":
    unittest.main()
