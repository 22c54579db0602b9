"""Server-side relay to the federation site."""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

import requests

from nosjoueurs.constants import (
    FFE_HOST,
    FFE_REQUEST_HEADERS,
    SCRAPE_MIN_HTML_LENGTH,
    SCRAPE_TIMEOUT,
)
from nosjoueurs.errors import ForbiddenError, UpstreamError, ValidationError
from nosjoueurs.ffe.urls import is_allowed_host

logger = logging.getLogger(__name__)


class FetchProxy:
    """Fetch federation pages on behalf of the browser.

    Only the federation host and its subdomains can be reached. Responses
    are never cached.
    """

    def __init__(
        self,
        allowed_host: str = FFE_HOST,
        timeout: float = SCRAPE_TIMEOUT,
        min_length: int = SCRAPE_MIN_HTML_LENGTH,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the proxy."""
        self.allowed_host = allowed_host
        self.timeout = timeout
        self.min_length = min_length
        self.session = session or requests.Session()

    def check_url(self, url: object) -> str:
        """Return ``url`` if it may be fetched, raise otherwise.

        Raises:
            ValidationError: If ``url`` is missing or does not parse as an
                http(s) URL with a host.
            ForbiddenError: If the host is not the federation host.
        """
        if not url or not isinstance(url, str):
            raise ValidationError("Invalid URL provided")
        try:
            parts = urlsplit(url.strip())
            hostname = parts.hostname
        except ValueError as e:
            raise ValidationError("Invalid URL provided") from e
        if parts.scheme not in ("http", "https") or not hostname:
            raise ValidationError("Invalid URL provided")
        if not is_allowed_host(url, self.allowed_host):
            raise ForbiddenError("Only FFE URLs are allowed")
        return url

    def fetch(self, url: object) -> str:
        """Return the HTML of an allowed federation page.

        Raises:
            ValidationError: If ``url`` is missing or malformed.
            ForbiddenError: If ``url`` is not on the federation host.
            UpstreamError: If the request fails, the upstream answers with a
                non-2xx status or the body is too short to be a real page.
        """
        checked = self.check_url(url)
        try:
            response = self.session.get(
                checked, headers=FFE_REQUEST_HEADERS, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise UpstreamError(f"Could not reach FFE server: {e}") from e

        if not 200 <= response.status_code < 300:
            raise UpstreamError(
                f"FFE server returned {response.status_code}",
                upstream_status=response.status_code,
            )

        # requests falls back to ISO-8859-1 for text/html without a charset
        if "charset" not in response.headers.get("Content-Type", "").lower():
            response.encoding = "utf-8"
        html = response.text
        if not html or len(html) < self.min_length:
            raise UpstreamError("Invalid or empty HTML response from FFE")

        logger.info("Fetched %s (%d chars)", checked, len(html))
        return html
