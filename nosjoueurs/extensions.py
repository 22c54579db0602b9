"""Flask extensions for the application."""

from flask import current_app, g, request

from .constants import RATE_LIMIT_HEADER
from .errors import RateLimitError
from .rate_limit import RateLimiter


def get_client_ip(req):
    """Return the first forwarded-for address, else X-Real-IP, else "unknown"."""
    forwarded = req.headers.get("X-Forwarded-For", "")
    first = forwarded.split(",")[0].strip()
    return first or req.headers.get("X-Real-IP") or "unknown"


class RequestThrottle:
    """Rate limit the scrape and events API families per client IP.

    The limiters are built in ``init_app`` and stored on the application, so
    their lifetime is the application's and tests get fresh windows with
    every ``create_app``.
    """

    def __init__(self, app=None):
        """Initialize the extension."""
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Build the limiters and register the request hooks."""
        app.extensions["rate_limiters"] = {
            "scrape": RateLimiter(
                app.config["SCRAPE_RATE_LIMIT"], app.config["SCRAPE_RATE_WINDOW"]
            ),
            "events": RateLimiter(
                app.config["EVENTS_RATE_LIMIT"], app.config["EVENTS_RATE_WINDOW"]
            ),
        }
        app.before_request(self._check_limit)
        app.after_request(self._set_remaining_header)

    @staticmethod
    def limiter_for_path(path):
        """Return the limiter family name for a request path, if any."""
        if path.startswith("/api/events"):
            return "events"
        if path.startswith("/api/scrape"):
            return "scrape"
        return None

    def _check_limit(self):
        family = self.limiter_for_path(request.path)
        if family is None:
            return None

        limiter = current_app.extensions["rate_limiters"][family]
        result = limiter.check(get_client_ip(request))
        g.rate_limit_remaining = result.remaining
        if not result.allowed:
            current_app.logger.warning(
                f"Rate limit exceeded on {family} for {get_client_ip(request)}"
            )
            raise RateLimitError()
        return None

    @staticmethod
    def _set_remaining_header(response):
        remaining = g.get("rate_limit_remaining")
        if remaining is not None:
            response.headers[RATE_LIMIT_HEADER] = str(remaining)
        return response


throttle = RequestThrottle()
