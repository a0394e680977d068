import httpx

from resolution_worker.http.headers import HTML_ACCEPT
from resolution_worker.logging.logger import Log
from resolution_worker.processor.exceptions import FatalDiscoveryError


class ListingClient:
    """Downloads the HTML of the listing page."""

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    def fetch(self, url: str) -> str:
        """Return the page HTML.

        Raises:
            FatalDiscoveryError: on network failure, non-2xx status or empty body.
        """
        try:
            response = self._client.get(url, headers={"Accept": HTML_ACCEPT})
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            Log.error(
                f"Listing page {url} returned {exc.response.status_code}; "
                f"headers: {dict(exc.response.headers)}"
            )
            raise FatalDiscoveryError(
                f"Listing page {url} returned {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            Log.error(f"Listing page {url} unreachable: {exc}")
            raise FatalDiscoveryError(f"Listing page {url} unreachable: {exc}") from exc

        Log.debug(f"Listing page {url} answered {response.status_code}")
        if not response.text.strip():
            raise FatalDiscoveryError(f"Listing page {url} returned an empty body")
        return response.text
