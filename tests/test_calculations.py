"""Tests for the club statistics."""

import unittest

from nosjoueurs.ffe import calculations
from tests.helpers import make_player


class CalculationsTestCase(unittest.TestCase):
    """Test case for the aggregate figures."""

    def test_total_points_and_result_stats(self):
        results = make_player(scores=(1, 0.5, 0, 1))["results"]

        self.assertEqual(calculations.calculate_total_points(results), 2.5)
        self.assertEqual(
            calculations.calculate_result_stats(results),
            {"wins": 2, "draws": 1, "losses": 1},
        )

    def test_average_rating_ignores_unrated(self):
        players = [
            make_player(name="A", elo=1500),
            make_player(name="B", elo=1600),
            make_player(name="C", elo=0),
        ]
        self.assertEqual(calculations.calculate_average_rating(players), 1550)
        self.assertEqual(calculations.calculate_average_rating([]), 0)

    def test_sort_players_by_score(self):
        players = [
            make_player(name="LOW", scores=(0,)),
            make_player(name="HIGH B", scores=(1,), elo=1400),
            make_player(name="HIGH A", scores=(1,), elo=1400),
            make_player(name="HIGH RATED", scores=(1,), elo=1800),
        ]
        ordered = calculations.sort_players_by_score(players)
        self.assertEqual(
            [p["name"] for p in ordered], ["HIGH RATED", "HIGH A", "HIGH B", "LOW"]
        )

    def test_club_stats(self):
        players = [
            make_player(name="P1", scores=(1, 0.5)),
            make_player(name="P2", scores=(0, 1)),
        ]
        stats = calculations.calculate_club_stats(players, 2)

        self.assertEqual(
            stats,
            {"round": 2, "totalPoints": 2.5, "playerCount": 2, "averagePoints": 1.25},
        )

    def test_club_stats_counts_up_to_round(self):
        players = [make_player(scores=(1, 1, 1))]
        stats = calculations.calculate_club_stats(players, 2)

        self.assertEqual(stats["totalPoints"], 2)
        self.assertEqual(stats["averagePoints"], 2)

    def test_club_stats_empty(self):
        self.assertEqual(
            calculations.calculate_club_stats([], 1),
            {"round": 1, "totalPoints": 0, "playerCount": 0, "averagePoints": 0},
        )


if __name__ == "__main__":
    unittest.main()
