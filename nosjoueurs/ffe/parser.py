"""Extract club membership and round results from FFE tournament pages.

The federation publishes three pages per tournament that matter here:

* ``Action=Ls``: the player list, one row per player with name and club.
* ``Action=Ga``: the results grid. Each player's row nests a
  ``div.papi_joueur_box`` holding a sub-table with a header row followed by
  one row per round.
* ``Action=Stats``: statistics, including a "Répartition par clubs" section.

None of this markup is meant for machines. Cells are read at fixed
positions that were taken from real pages; they are kept as named constants
below so that a change on the federation side fails the fixture tests
instead of silently shifting columns. Rows that do not have the expected
shape are skipped, never raised on.
"""

from __future__ import annotations

import logging
import re
from typing import NamedTuple

from bs4 import BeautifulSoup

from nosjoueurs.constants import EXEMPT_OPPONENT
from nosjoueurs.core.types import ClubInfo, Player, Result

logger = logging.getLogger(__name__)

# Player list page (Action=Ls): Nr, [blank], Nom, Rapide, Cat, Fede, Ligue, Club
LIST_MIN_CELLS = 8
LIST_NAME_CELL = 2
LIST_CLUB_CELL = 7

# Results grid (Action=Ga)
PLAYER_BOX_CLASS = "papi_joueur_box"

# Header row of the player sub-table (11 cells)
HEADER_RANKING_CELL = 1
HEADER_RATING_CELL = 4
HEADER_POINTS_CELL = 8
HEADER_TIEBREAK_CELL = 9
HEADER_BUCHHOLZ_CELL = 10

# Round rows of the player sub-table: 13 cells, byes use a compact 4-cell row
ROUND_MIN_CELLS = 6
ROUND_NUMBER_CELL = 0
ROUND_SCORE_CELL = 2
ROUND_OPPONENT_CELL = 5

# Statistics page (Action=Stats)
STATS_HEADER_CLASS = "papi_liste_t"
STATS_CELL_CLASS = "papi_liste_c"
CLUB_SECTION_MARKERS = (
    "partition par clubs",
    "repartition par clubs",
    "répartition par clubs",
)
CLUB_SUBHEADER_MARKER = "clubs repr"

EXEMPT_TOKEN = "EXE"
HALF_POINT_TOKENS = ("½", "&frac12;", "0.5", "0,5")

_WHITESPACE_RE = re.compile(r"\s+")
_DIGITS_RE = re.compile(r"\d+")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT_RE = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))")
_TRAILING_COLON_RE = re.compile(r"\s*:\s*$")


class ParsedTournament(NamedTuple):
    """Players of the target club and the latest round seen."""

    players: list[Player]
    current_round: int


def normalize_player_name(raw: str) -> str:
    """Upper-case a name and collapse its whitespace.

    This is the join key between the list and results pages.

    >>> normalize_player_name("  BACHKAT   Fares ")
    'BACHKAT FARES'
    """
    return _WHITESPACE_RE.sub(" ", raw or "").strip().upper()


def _normalize_fraction(text: str) -> str:
    return (
        (text or "")
        .replace("&frac12;", ".5")
        .replace("½", ".5")
        .replace(",", ".")
    )


def parse_rating(text: str) -> int:
    """Parse a rating such as ``"1541 F"``; unrated players get 0."""
    match = _DIGITS_RE.search(text or "")
    return int(match.group(0)) if match else 0


def parse_optional_float(text: str) -> float | None:
    """Parse a leading decimal number, accepting the ``½`` glyph.

    ``"4½"`` gives 4.5 and ``"½"`` gives 0.5; anything unreadable gives None.
    """
    match = _LEADING_FLOAT_RE.match(_normalize_fraction(text))
    if not match:
        return None
    return float(match.group(1))


def parse_points(text: str) -> float:
    """Parse a points total, 0 when unreadable."""
    value = parse_optional_float(text)
    return value if value is not None else 0.0


def parse_optional_int(text: str) -> int | None:
    match = _LEADING_INT_RE.match(text or "")
    if not match:
        return None
    return int(match.group(1))


def is_exempt_marker(text: str) -> bool:
    """Return True when a round cell carries the exempt token."""
    return (text or "").strip().upper() == EXEMPT_TOKEN


def parse_score(text: str) -> float:
    """Map a round score cell to 1, 0.5 or 0."""
    token = (text or "").strip()
    if token == "1" or is_exempt_marker(token):
        return 1
    if token in HALF_POINT_TOKENS:
        return 0.5
    return 0


def is_header_row(cells: list, min_cells: int = LIST_MIN_CELLS) -> bool:
    """Return True for header or decoration rows of the player list."""
    return len(cells) < min_cells


def is_bye_row(cells: list) -> bool:
    """Return True for the compact rows used for byes and absences."""
    return len(cells) < ROUND_MIN_CELLS


def _cell_text(cells: list, index: int) -> str:
    if index >= len(cells):
        return ""
    return cells[index].get_text().strip()


def extract_club_membership(list_html: str) -> dict[str, str]:
    """Map each normalized player name of the list page to its club."""
    soup = BeautifulSoup(list_html or "", "html.parser")
    membership: dict[str, str] = {}

    for row in soup.select("table tr"):
        cells = row.find_all("td")
        if is_header_row(cells):
            continue

        name = normalize_player_name(_cell_text(cells, LIST_NAME_CELL))
        club = _cell_text(cells, LIST_CLUB_CELL)
        if name and club:
            membership[name] = club

    logger.debug("Found %d players on list page", len(membership))
    return membership


def _parse_round(cells: list) -> Result:
    round_number = parse_optional_int(_cell_text(cells, ROUND_NUMBER_CELL)) or 0
    score_text = _cell_text(cells, ROUND_SCORE_CELL)
    opponent = _cell_text(cells, ROUND_OPPONENT_CELL)

    if is_exempt_marker(score_text) or is_exempt_marker(opponent):
        return {"round": round_number, "score": 1, "opponent": EXEMPT_OPPONENT}

    result: Result = {"round": round_number, "score": parse_score(score_text)}
    if opponent:
        result["opponent"] = opponent
    return result


def _parse_player_box(box, name: str, club: str) -> Player | None:
    sub_table = box.find("table")
    if sub_table is None:
        return None

    rows = sub_table.find_all("tr")
    if not rows:
        return None

    header_cells = rows[0].find_all("td")

    # Performance is not in the sub-table: it is the last cell of the outer
    # row, counted from the cell that holds the player box.
    performance = None
    outer_cell = box.find_parent("td")
    if outer_cell is not None:
        following = outer_cell.find_next_siblings("td")
        if following:
            performance = parse_optional_int(following[-1].get_text())

    results = [
        _parse_round(cells)
        for cells in (row.find_all("td") for row in rows[1:])
        if not is_bye_row(cells)
    ]

    player: Player = {
        "name": name,
        "elo": parse_rating(_cell_text(header_cells, HEADER_RATING_CELL)),
        "club": club,
        "ranking": parse_optional_int(_cell_text(header_cells, HEADER_RANKING_CELL))
        or 0,
        "results": results,
        "currentPoints": parse_points(_cell_text(header_cells, HEADER_POINTS_CELL)),
        "validated": [False] * len(results),
    }

    optional_stats = {
        "tiebreak": parse_optional_float(
            _cell_text(header_cells, HEADER_TIEBREAK_CELL)
        ),
        "buchholz": parse_optional_float(
            _cell_text(header_cells, HEADER_BUCHHOLZ_CELL)
        ),
        "performance": performance,
    }
    for key, value in optional_stats.items():
        if value is not None:
            player[key] = value  # type: ignore[literal-required]
    return player


def extract_results(
    results_html: str, membership: dict[str, str], target_club: str
) -> list[Player]:
    """Return the players of ``target_club`` found in a results grid.

    Players missing from ``membership`` or belonging to another club are
    dropped.
    """
    soup = BeautifulSoup(results_html or "", "html.parser")
    players: list[Player] = []

    for box in soup.find_all("div", class_=PLAYER_BOX_CLASS):
        name_tag = box.find("b")
        if name_tag is None:
            continue

        name = normalize_player_name(name_tag.get_text())
        club = membership.get(name, "")
        if not club or club != target_club:
            continue

        player = _parse_player_box(box, name, club)
        if player is None:
            logger.debug("Skipping malformed player box for %s", name)
            continue
        players.append(player)

    return players


def detect_current_round(players: list[Player]) -> int:
    """Return the highest round number any player has a result for."""
    return max(
        (result["round"] for player in players for result in player["results"]),
        default=0,
    )


def parse_both_pages(
    list_html: str, results_html: str, target_club: str
) -> ParsedTournament:
    """Parse the list and results pages into the target club's players."""
    membership = extract_club_membership(list_html)
    parsed = extract_results(results_html, membership, target_club)

    seen: set[str] = set()
    players = []
    for player in parsed:
        if player["name"] in seen:
            continue
        seen.add(player["name"])
        players.append(player)

    return ParsedTournament(players, detect_current_round(players))


def _is_club_section_header(text: str) -> bool:
    return any(marker in text for marker in CLUB_SECTION_MARKERS)


def extract_club_roster(stats_html: str) -> list[ClubInfo]:
    """Read the (club, player count) pairs of the statistics page."""
    soup = BeautifulSoup(stats_html or "", "html.parser")
    clubs: list[ClubInfo] = []
    in_section = False

    for row in soup.find_all("tr"):
        if STATS_HEADER_CLASS in (row.get("class") or []):
            text = row.get_text().strip().lower()
            if not in_section:
                in_section = _is_club_section_header(text)
                continue
            if CLUB_SUBHEADER_MARKER in text:
                continue
            break

        if not in_section:
            continue

        cells = row.find_all("td", class_=STATS_CELL_CLASS)
        if len(cells) < 2:
            continue

        name = _TRAILING_COLON_RE.sub("", cells[0].get_text().strip())
        count = parse_optional_int(_TRAILING_COLON_RE.sub("", cells[1].get_text()))
        if name:
            clubs.append({"name": name, "playerCount": count or 0})

    return clubs
