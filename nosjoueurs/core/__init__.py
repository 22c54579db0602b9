"""Core module for the nosjoueurs application."""

from .types import (
    ClubIdentity,
    ClubInfo,
    ClubStats,
    Event,
    ExportedEvent,
    Player,
    Result,
    StorageData,
    Tournament,
    ValidationState,
)

__all__ = [
    "ClubIdentity",
    "ClubInfo",
    "ClubStats",
    "Event",
    "ExportedEvent",
    "Player",
    "Result",
    "StorageData",
    "Tournament",
    "ValidationState",
]
