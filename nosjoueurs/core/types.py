"""Core data types for the nosjoueurs application.

Documents are plain dictionaries so they serialise to the same JSON shape
whether they live in the client store, in a shared link or in Firestore.
"""

from typing import Dict, List, Optional, TypedDict  # noqa: UP035


class _ResultBase(TypedDict):
    round: int
    score: float


class Result(_ResultBase, total=False):
    """One round of a player's tournament."""

    opponent: str


class _PlayerBase(TypedDict):
    name: str
    elo: int
    club: str
    results: List[Result]  # noqa: UP006
    currentPoints: float
    ranking: int
    validated: List[bool]  # noqa: UP006


class Player(_PlayerBase, total=False):
    """A club member's standing in one tournament."""

    tiebreak: Optional[float]
    buchholz: Optional[float]
    performance: Optional[int]


class ClubInfo(TypedDict):
    """A club found on a tournament statistics page."""

    name: str
    playerCount: int


class Tournament(TypedDict):
    """One bracket or age group of an event."""

    id: str
    name: str
    url: str
    lastUpdate: str
    players: List[Player]  # noqa: UP006


class _EventBase(TypedDict):
    id: str
    name: str
    createdAt: str
    tournaments: List[Tournament]  # noqa: UP006


class Event(_EventBase, total=False):
    """A tracked competition grouping several tournaments."""

    clubName: Optional[str]
    availableClubs: List[ClubInfo]  # noqa: UP006


# tournament id -> player name -> "round_<n>" -> validated
ValidationState = Dict[str, Dict[str, Dict[str, bool]]]  # noqa: UP006


class StorageData(TypedDict):
    """Root document persisted per club slug."""

    currentEventId: str
    events: List[Event]  # noqa: UP006
    validations: ValidationState


class ClubIdentity(TypedDict):
    """The club this device is bound to."""

    clubName: str
    clubSlug: str
    createdAt: str


class ExportedEvent(TypedDict):
    """Versioned envelope used for file export and shared links."""

    version: str
    exportDate: str
    event: Event
    validations: ValidationState


class ClubStats(TypedDict):
    """Aggregate club score for a round."""

    round: int
    totalPoints: float
    playerCount: int
    averagePoints: float
