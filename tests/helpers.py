"""Builders for the documents used across the test suite."""

import json
import os

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")

TOURNAMENT_URL = (
    "https://www.echecs.asso.fr/Resultats.aspx?URL=Tournois/Id/68994/68994&Action=Ga"
)


def load_fixture(name):
    """Return the text of a captured federation page."""
    with open(os.path.join(FIXTURES_DIR, name), encoding="utf-8") as f:
        return f.read()


def make_player(name="BACHKAT FARES", club="Hay Chess", scores=(1, 0.5), **extra):
    """Build a player whose rounds are numbered from 1."""
    results = [
        {"round": i, "score": score, "opponent": f"OPP {i}"}
        for i, score in enumerate(scores, start=1)
    ]
    player = {
        "name": name,
        "elo": 1500,
        "club": club,
        "ranking": 1,
        "results": results,
        "currentPoints": float(sum(scores)),
        "validated": [False] * len(results),
    }
    player.update(extra)
    return player


def make_tournament(tournament_id="t1", name="U12", players=None, url=TOURNAMENT_URL):
    return {
        "id": tournament_id,
        "name": name,
        "url": url,
        "lastUpdate": "",
        "players": list(players or []),
    }


def make_event(event_id="e1", name="Open de Marseille", tournaments=None, **extra):
    event = {
        "id": event_id,
        "name": name,
        "createdAt": "2026-01-10T09:00:00+00:00",
        "tournaments": list(
            tournaments if tournaments is not None else [make_tournament()]
        ),
    }
    event.update(extra)
    return event


def make_storage_data(events=None, validations=None, current_event_id=""):
    return {
        "currentEventId": current_event_id,
        "events": list(events or []),
        "validations": dict(validations or {}),
    }


class FakeResponse:
    """Minimal stand-in for ``requests.Response``."""

    def __init__(self, status_code=200, payload=None, text=None, headers=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)
        self.headers = dict(headers or {})
        self.encoding = None

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload
