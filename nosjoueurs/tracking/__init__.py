"""Refresh an event's tournaments from the federation site."""

from .scraper import ScrapeClient
from .services import TournamentSync

__all__ = ["ScrapeClient", "TournamentSync"]
