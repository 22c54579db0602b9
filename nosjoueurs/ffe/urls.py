"""URL helpers for FFE tournament pages."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from nosjoueurs.constants import FFE_HOST, FFE_RESULTS_BASE_URL

_FICHE_RE = re.compile(r"FicheTournoi\.aspx\?Ref=(\d+)")
_RESULTS_RE = re.compile(r"Tournois/Id/(\d+)")


def extract_tournament_id(url: str) -> str | None:
    """Return the numeric tournament id from a FicheTournoi or Resultats URL."""
    match = _FICHE_RE.search(url) or _RESULTS_RE.search(url)
    return match.group(1) if match else None


def _page_url(tournament_id: str, action: str) -> str:
    return (
        f"{FFE_RESULTS_BASE_URL}?URL=Tournois/Id/{tournament_id}/{tournament_id}"
        f"&Action={action}"
    )


def get_list_url(tournament_url: str) -> str:
    """Return the player list page (Action=Ls), which carries each player's club."""
    tournament_id = extract_tournament_id(tournament_url)
    if not tournament_id:
        return tournament_url.replace("Action=Ga", "Action=Ls")
    return _page_url(tournament_id, "Ls")


def get_results_url(tournament_url: str) -> str:
    """Return the results grid page (Action=Ga)."""
    tournament_id = extract_tournament_id(tournament_url)
    if not tournament_id:
        return tournament_url
    return _page_url(tournament_id, "Ga")


def get_stats_url(tournament_url: str) -> str:
    """Return the statistics page (Action=Stats), which lists clubs."""
    tournament_id = extract_tournament_id(tournament_url)
    if not tournament_id:
        return tournament_url
    return _page_url(tournament_id, "Stats")


def is_allowed_host(url: str, canonical_host: str = FFE_HOST) -> bool:
    """Check that ``url`` points at the federation host or one of its subdomains.

    Matching is done on the parsed hostname only: either an exact match or a
    suffix match after a dot. Substring checks would let through
    ``https://attacker.com/?x=echecs.asso.fr`` or
    ``https://echecs.asso.fr.attacker.com``.
    """
    if not isinstance(url, str):
        return False
    try:
        parts = urlsplit(url.strip())
        hostname = parts.hostname
    except ValueError:
        return False
    if parts.scheme not in ("http", "https") or not hostname:
        return False
    canonical = canonical_host.lower()
    return hostname == canonical or hostname.endswith("." + canonical)


def is_valid_tournament_url(url: str) -> bool:
    """Return True for a non-blank URL on the federation site."""
    if not url or not url.strip():
        return False
    return is_allowed_host(url)
