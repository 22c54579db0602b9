"""Utility functions for the application."""

from flask import make_response

CORS_HEADERS = {
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,OPTIONS,PATCH,DELETE,POST,PUT",
    "Access-Control-Allow-Headers": (
        "X-CSRF-Token, X-Requested-With, Accept, Accept-Version, "
        "Content-Length, Content-MD5, Content-Type, Date, X-Api-Version, "
        "X-Sync-Token"
    ),
}


def apply_cors_headers(response):
    """Add the open CORS headers used by every API response."""
    for name, value in CORS_HEADERS.items():
        response.headers[name] = value
    return response


def preflight_response():
    """Return an empty 200 response for a CORS preflight request."""
    return apply_cors_headers(make_response("", 200))


def get_json_body(request):
    """Return the request JSON object, or an empty dict when it is not one."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return {}
    return body
