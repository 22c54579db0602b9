"""Client of the scrape endpoint."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

import requests

from nosjoueurs.constants import SCRAPE_TIMEOUT
from nosjoueurs.errors import NotFoundError, UpstreamError

logger = logging.getLogger(__name__)

SCRAPE_ENDPOINT = "/api/scrape"


def raise_scrape_error(status: int, context: str):
    """Turn a failed scrape status into a user-facing error."""
    if status == 404:
        raise NotFoundError("Tournament not found on the FFE site")
    if status == 500:
        raise UpstreamError("The FFE server is having problems", upstream_status=500)
    raise UpstreamError(
        f"Error while loading {context} ({status})", upstream_status=status
    )


def read_html(response: requests.Response) -> str:
    """Return the page carried by a successful scrape response."""
    try:
        payload = response.json()
    except ValueError as e:
        raise UpstreamError("Invalid response from the scrape endpoint") from e
    html = payload.get("html") if isinstance(payload, dict) else None
    if not isinstance(html, str):
        raise UpstreamError("Invalid response from the scrape endpoint")
    return html


class ScrapeClient:
    """Fetch federation pages through the server's scrape endpoint."""

    def __init__(
        self,
        base_url: str,
        session: requests.Session | None = None,
        timeout: float = SCRAPE_TIMEOUT,
    ) -> None:
        """Initialize the client."""
        self.endpoint = base_url.rstrip("/") + SCRAPE_ENDPOINT
        self.session = session or requests.Session()
        self.timeout = timeout

    def _post(self, url: str) -> requests.Response:
        try:
            return self.session.post(
                self.endpoint, json={"url": url}, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise UpstreamError(f"Could not reach the scrape endpoint: {e}") from e

    def scrape(self, url: str, context: str = "FFE data") -> str:
        """Return the HTML of one federation page."""
        response = self._post(url)
        if not response.ok:
            raise_scrape_error(response.status_code, context)
        return read_html(response)

    def scrape_pair(self, list_url: str, results_url: str) -> tuple[str, str]:
        """Fetch the list and results pages in parallel."""
        with ThreadPoolExecutor(max_workers=2) as executor:
            list_future = executor.submit(self._post, list_url)
            results_future = executor.submit(self._post, results_url)
            list_response = list_future.result()
            results_response = results_future.result()

        for response in (list_response, results_response):
            if not response.ok:
                raise_scrape_error(response.status_code, "FFE results")

        logger.debug("Fetched list and results pages for %s", results_url)
        return read_html(list_response), read_html(results_response)
