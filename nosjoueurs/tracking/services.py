"""Per-event refresh workflow.

An event goes through two phases, chosen by whether it has a bound club:

1. Club discovery. The statistics page of a tournament is read and the
   clubs it lists are stored on the event as ``availableClubs``.
2. Result fetch. The list and results pages are read and the players of
   the bound club replace the tournament's players.

Every network or parsing failure is caught and kept in ``error`` instead of
propagating; the next attempt clears it.
"""

from __future__ import annotations

import copy
import datetime
import logging
from typing import Callable

from nosjoueurs.core.types import Event, Tournament
from nosjoueurs.errors import (
    NoClubsDetectedError,
    NoPlayersFoundError,
    describe_error,
)
from nosjoueurs.ffe.parser import extract_club_roster, parse_both_pages
from nosjoueurs.ffe.urls import get_list_url, get_results_url, get_stats_url
from nosjoueurs.storage.services import ClubStorage

from .scraper import ScrapeClient

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def _reset_tournament(tournament: Tournament) -> Tournament:
    return {**tournament, "players": [], "lastUpdate": ""}


class TournamentSync:
    """Drive the refresh of one event's tournaments.

    Each change to the event is written to ``storage`` and then passed to
    ``on_event_update``. The event held here is always the latest committed
    one, so sequential updates never overwrite each other.
    """

    def __init__(
        self,
        event: Event,
        storage: ClubStorage,
        scraper: ScrapeClient,
        on_event_update: Callable[[Event], None] | None = None,
    ) -> None:
        """Initialize the workflow for ``event``."""
        self.event = copy.deepcopy(event)
        self.storage = storage
        self.scraper = scraper
        self.on_event_update = on_event_update
        self.loading: str | None = None
        self.error: str | None = None
        self.change_club_pending = False
        tournaments = self.event["tournaments"]
        self.active_tab = tournaments[0]["id"] if tournaments else ""

    # Derived state

    @property
    def player_count(self) -> int:
        return sum(len(t["players"]) for t in self.event["tournaments"])

    @property
    def needs_club_selection(self) -> bool:
        return bool(self.event.get("availableClubs")) and not self.event.get(
            "clubName"
        )

    @property
    def can_change_club(self) -> bool:
        return bool(self.event.get("clubName")) and bool(
            self.event.get("availableClubs")
        )

    def get_tournament(self, tournament_id: str) -> Tournament | None:
        return next(
            (t for t in self.event["tournaments"] if t["id"] == tournament_id), None
        )

    # Internals

    def _commit(self, event: Event) -> None:
        self.event = event
        self.storage.save_event(event)
        if self.on_event_update is not None:
            self.on_event_update(copy.deepcopy(event))

    def _replace_tournament(self, tournament: Tournament) -> None:
        self._commit(
            {
                **self.event,
                "tournaments": [
                    tournament if t["id"] == tournament["id"] else t
                    for t in self.event["tournaments"]
                ],
            }
        )

    def _fetch_tournament_results(
        self, tournament: Tournament, club_name: str
    ) -> Tournament:
        list_html, results_html = self.scraper.scrape_pair(
            get_list_url(tournament["url"]), get_results_url(tournament["url"])
        )
        parsed = parse_both_pages(list_html, results_html, club_name)
        if not parsed.players:
            raise NoPlayersFoundError(club_name)
        logger.info(
            "Tournament %s: %d %s players, round %d",
            tournament["id"],
            len(parsed.players),
            club_name,
            parsed.current_round,
        )
        return {**tournament, "players": parsed.players, "lastUpdate": _now_iso()}

    def _fetch_clubs(self, tournament: Tournament) -> None:
        html = self.scraper.scrape(get_stats_url(tournament["url"]), "FFE statistics")
        clubs = extract_club_roster(html)
        if not clubs:
            raise NoClubsDetectedError()
        self._commit({**self.event, "availableClubs": clubs})

    def _run(self, tournament: Tournament, action: Callable[[], None]) -> bool:
        self.loading = tournament["id"]
        self.error = None
        try:
            action()
            return True
        except Exception as e:
            logger.error("Error refreshing tournament %s: %s", tournament["id"], e)
            self.error = describe_error(e)
            return False
        finally:
            self.loading = None

    # Operations

    def handle_refresh(self, tournament_id: str) -> bool:
        """Refresh one tournament; discover clubs first if none is bound.

        Returns False when the refresh failed or was skipped.
        """
        tournament = self.get_tournament(tournament_id)
        if tournament is None or self.loading == tournament_id:
            return False

        club_name = self.event.get("clubName")
        if not club_name:
            return self._run(tournament, lambda: self._fetch_clubs(tournament))

        return self._run(
            tournament,
            lambda: self._replace_tournament(
                self._fetch_tournament_results(tournament, club_name)
            ),
        )

    def handle_club_select(self, club_name: str) -> int:
        """Bind ``club_name`` and refresh every tournament in turn.

        A failing tournament does not stop the others. Returns the number of
        tournaments refreshed.
        """
        self._commit({**self.event, "clubName": club_name})

        refreshed = 0
        for tournament_id in [t["id"] for t in self.event["tournaments"]]:
            tournament = self.get_tournament(tournament_id)

            def refresh(tournament=tournament):
                self._replace_tournament(
                    self._fetch_tournament_results(tournament, club_name)
                )

            if self._run(tournament, refresh):
                refreshed += 1
        return refreshed

    def _unbind_club(self) -> None:
        self.error = None
        event = {
            **self.event,
            "tournaments": [_reset_tournament(t) for t in self.event["tournaments"]],
        }
        event.pop("clubName", None)
        self._commit(event)

    def request_change_club(self) -> bool:
        """Unbind the club now, or ask for confirmation when players exist.

        Returns True when a confirmation is now pending.
        """
        if self.player_count > 0:
            self.change_club_pending = True
            return True
        self._unbind_club()
        return False

    def confirm_change_club(self) -> None:
        """Drop all players and their validations, then unbind the club."""
        self.change_club_pending = False
        for tournament in self.event["tournaments"]:
            self.storage.clear_tournament_validations(tournament["id"])
        self._unbind_club()

    def cancel_change_club(self) -> None:
        self.change_club_pending = False

    def refresh_active_tab(self) -> bool:
        """Refresh the tournament shown in the active tab."""
        if not self.active_tab:
            return False
        return self.handle_refresh(self.active_tab)
