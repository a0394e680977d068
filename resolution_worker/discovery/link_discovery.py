"""Heuristic scan of a listing page for links to resolution documents.

Each heuristic is a pure function over the parsed page returning candidate
URLs. ``discover_links`` unions them; duplicates collapse on the absolute URL.
"""

import re
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from resolution_worker.discovery.listing_client import ListingClient
from resolution_worker.logging.logger import Log
from resolution_worker.processor.exceptions import FatalDiscoveryError

MARKER_TOKEN = "obtenerBinarioDocumento"
DOMAIN_KEYWORDS = ("resolución", "concesión", "ayuda", "kit digital")

_HANDLER_PATH = re.compile(rf"{MARKER_TOKEN}/([^'\"\s)]+)")
_IGNORED_SCHEMES = ("javascript:", "mailto:", "tel:")


def _attr(tag: Tag, name: str) -> str:
    value = tag.get(name)
    if isinstance(value, list):
        return " ".join(value)
    return (value or "").strip()


def resolve_url(href: str, base_url: str) -> str | None:
    """Resolve href against base_url. Returns None for non-navigable hrefs."""
    href = href.strip()
    if not href or href.startswith("#") or href.lower().startswith(_IGNORED_SCHEMES):
        return None
    return urljoin(base_url, href)


def _marker_href_links(soup: BeautifulSoup, base_url: str) -> list[str]:
    values = [_attr(a, "href") for a in soup.find_all("a")]
    values += [_attr(img, "src") for img in soup.find_all("img")]
    links = [resolve_url(value, base_url) for value in values if MARKER_TOKEN in value]
    return [link for link in links if link]


def _script_handler_links(soup: BeautifulSoup, base_url: str) -> list[str]:
    values = [_attr(a, "onclick") for a in soup.find_all("a")]
    values += [_attr(img, "title") for img in soup.find_all("img")]
    root = base_url.rstrip("/")
    links: list[str] = []
    for value in values:
        match = _HANDLER_PATH.search(value)
        if match:
            links.append(f"{root}/{MARKER_TOKEN}/{match.group(1)}")
    return links


def _keyword_links(soup: BeautifulSoup, base_url: str) -> list[str]:
    links: list[str] = []
    for a in soup.find_all("a", href=True):
        text = a.get_text(" ", strip=True).lower()
        if any(keyword in text for keyword in DOMAIN_KEYWORDS):
            link = resolve_url(_attr(a, "href"), base_url)
            if link:
                links.append(link)
    return links


def _table_row_links(soup: BeautifulSoup, base_url: str) -> list[str]:
    links = [resolve_url(_attr(a, "href"), base_url) for a in soup.select("table tr a[href]")]
    return [link for link in links if link]


HEURISTICS = (
    _marker_href_links,
    _script_handler_links,
    _keyword_links,
    _table_row_links,
)


def discover_links(html: str, base_url: str) -> set[str]:
    """Return the set of absolute document URLs found on a listing page.

    Raises:
        FatalDiscoveryError: if the page cannot be parsed.
    """
    try:
        soup = BeautifulSoup(html, "html.parser")
    except Exception as exc:
        raise FatalDiscoveryError(f"Listing page {base_url} could not be parsed: {exc}") from exc

    links: set[str] = set()
    for heuristic in HEURISTICS:
        found = heuristic(soup, base_url)
        Log.debug(f"{heuristic.__name__}: {len(found)} candidate links")
        links.update(found)
    return links


class LinkDiscovery:
    """Fetches the listing page and scans it for document links."""

    def __init__(self, listing_client: ListingClient, listing_url: str) -> None:
        self._listing_client = listing_client
        self._listing_url = listing_url

    def discover(self) -> list[str]:
        """Return discovered document URLs in a stable (sorted) order.

        Raises:
            FatalDiscoveryError: if the listing page is unreachable or unparsable.
        """
        Log.info(f"Looking for resolution documents on {self._listing_url}")
        html = self._listing_client.fetch(self._listing_url)
        links = sorted(discover_links(html, self._listing_url))
        Log.info(f"Found {len(links)} candidate document links")
        return links
