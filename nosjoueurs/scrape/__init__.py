"""The scrape blueprint."""

from flask import Blueprint

bp = Blueprint("scrape", __name__, url_prefix="/api/scrape")

from . import routes  # noqa: E402

__all__ = ["routes"]
