import httpx

from resolution_worker.http.headers import PDF_ACCEPT
from resolution_worker.logging.logger import Log
from resolution_worker.processor.exceptions import DocumentFetchError
from resolution_worker.processor.models import PDF_CONTENT_TYPE, RawDocument


class DocumentFetcher:
    """Downloads a resolution document and checks it is a PDF."""

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    def fetch(self, url: str) -> RawDocument | None:
        """Download url. Returns None when the response is not a PDF.

        Raises:
            DocumentFetchError: on timeout, connection failure or non-2xx status.
        """
        Log.info(f"Downloading document from {url}")
        try:
            response = self._client.get(url, headers={"Accept": PDF_ACCEPT})
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            Log.warning(
                f"Download of {url} failed with status {exc.response.status_code}; "
                f"headers: {dict(exc.response.headers)}"
            )
            raise DocumentFetchError(
                f"Download of {url} failed with status {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            Log.warning(f"Download of {url} failed: {exc!r}")
            raise DocumentFetchError(f"Download of {url} failed: {exc}") from exc

        content_type = response.headers.get("content-type", "")
        Log.debug(
            f"Response from {url}: status={response.status_code} content-type={content_type!r}"
        )
        if PDF_CONTENT_TYPE not in content_type.lower():
            Log.warning(f"{url} is not a PDF (content-type {content_type!r})")
            return None
        return RawDocument(url=url, content=response.content, content_type=content_type)
