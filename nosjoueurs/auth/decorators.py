"""Decorators for the sync API."""

from functools import wraps

from flask import current_app, g, request

from nosjoueurs.constants import SYNC_TOKEN_HEADER
from nosjoueurs.errors import AuthenticationError, ValidationError
from nosjoueurs.utils import get_json_body

from .utils import is_valid_slug, verify_sync_token


def _request_slug():
    if request.method == "GET":
        return request.args.get("clubSlug")
    return get_json_body(request).get("clubSlug")


def sync_token_required(f):
    """Reject the request unless it names a valid club slug and its token.

    The slug is checked first (400), then the ``X-Sync-Token`` header (401).
    Nothing is read or written before both pass. The slug is exposed as
    ``g.club_slug``.

    Usage:
    @sync_token_required
    def protected_view():
        ...
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        slug = _request_slug()
        if not is_valid_slug(slug):
            raise ValidationError(
                "Invalid or missing clubSlug. Must match /^[a-z0-9-]{1,40}$/"
            )

        token = request.headers.get(SYNC_TOKEN_HEADER, "")
        if not verify_sync_token(slug, token, current_app.config["SYNC_SECRET"]):
            raise AuthenticationError()

        g.club_slug = slug
        return f(*args, **kwargs)

    return decorated_function
