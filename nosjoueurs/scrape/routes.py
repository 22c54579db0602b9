"""Routes for the scrape blueprint."""

from flask import current_app, jsonify, request

from nosjoueurs.utils import get_json_body, preflight_response

from . import bp
from .services import FetchProxy


def get_fetch_proxy():
    """Return the proxy configured for the current app."""
    proxy = current_app.extensions.get("fetch_proxy")
    if proxy is None:
        proxy = FetchProxy(
            allowed_host=current_app.config["FFE_HOST"],
            timeout=current_app.config["SCRAPE_TIMEOUT"],
            min_length=current_app.config["SCRAPE_MIN_HTML_LENGTH"],
        )
        current_app.extensions["fetch_proxy"] = proxy
    return proxy


@bp.route("", methods=["POST"], provide_automatic_options=False)
def scrape():
    """Fetch a federation page and return its HTML."""
    url = get_json_body(request).get("url")
    html = get_fetch_proxy().fetch(url)
    return jsonify({"success": True, "html": html, "url": url})


@bp.route("", methods=["OPTIONS"])
def scrape_preflight():
    """Answer the CORS preflight."""
    return preflight_response()
