"""Authentication helpers for the sync API."""
