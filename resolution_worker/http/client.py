import httpx

from resolution_worker.config.settings import Settings
from resolution_worker.http.headers import ACCEPT_LANGUAGE


def build_http_client(settings: Settings) -> httpx.Client:
    """Build the shared HTTP client; the source rejects non-browser user agents."""
    return httpx.Client(
        timeout=settings.http_timeout_seconds,
        follow_redirects=True,
        headers={
            "User-Agent": settings.http_user_agent,
            "Accept-Language": ACCEPT_LANGUAGE,
        },
    )
