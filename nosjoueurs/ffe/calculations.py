"""Aggregate figures derived from parsed players."""

from __future__ import annotations

from nosjoueurs.core.types import ClubStats, Player, Result


def calculate_total_points(results: list[Result]) -> float:
    """Sum the scores of a list of round results."""
    return sum(result["score"] for result in results)


def calculate_result_stats(results: list[Result]) -> dict[str, int]:
    """Count wins, draws and losses."""
    stats = {"wins": 0, "draws": 0, "losses": 0}
    for result in results:
        if result["score"] == 1:
            stats["wins"] += 1
        elif result["score"] == 0.5:
            stats["draws"] += 1
        else:
            stats["losses"] += 1
    return stats


def calculate_average_rating(players: list[Player]) -> int:
    """Return the mean rating of rated players, 0 when none is rated."""
    ratings = [player["elo"] for player in players if player.get("elo")]
    if not ratings:
        return 0
    return round(sum(ratings) / len(ratings))


def sort_players_by_score(players: list[Player]) -> list[Player]:
    """Sort by points, then rating (both descending), then name."""
    return sorted(
        players,
        key=lambda p: (-p["currentPoints"], -(p.get("elo") or 0), p["name"]),
    )


def calculate_club_stats(players: list[Player], current_round: int) -> ClubStats:
    """Return the club's cumulated score up to ``current_round``."""
    if not players:
        return {
            "round": current_round,
            "totalPoints": 0,
            "playerCount": 0,
            "averagePoints": 0,
        }

    total_points = sum(
        result["score"]
        for player in players
        for result in player["results"]
        if result["round"] <= current_round
    )
    return {
        "round": current_round,
        "totalPoints": total_points,
        "playerCount": len(players),
        "averagePoints": round(total_points / len(players), 2),
    }
