import httpx

from resolution_worker.config.settings import Settings
from resolution_worker.database.repositories.case_record_repository import CaseRecordRepository
from resolution_worker.discovery.link_discovery import LinkDiscovery
from resolution_worker.discovery.listing_client import ListingClient
from resolution_worker.logging.logger import Log
from resolution_worker.processor.models import BatchSummary, DocumentResult, SkipReason
from resolution_worker.processor.processor import Processor, build_processor


class Harvester:
    """Discover links once, then process every document sequentially."""

    def __init__(self, discovery: LinkDiscovery, processor: Processor) -> None:
        self._discovery = discovery
        self._processor = processor

    def run(self) -> BatchSummary:
        """Run a full harvest.

        Raises:
            FatalDiscoveryError: if the listing page cannot be fetched or parsed.
        """
        links = self._discovery.discover()
        summary = BatchSummary(total=len(links))
        for url in links:
            summary.add(self._process(url))
        Log.info(f"Harvest finished: {summary.processed} of {summary.total} documents processed")
        return summary

    def _process(self, url: str) -> DocumentResult:
        try:
            return self._processor.process_url(url)
        except Exception as exc:
            Log.exception(f"Unexpected error processing {url}: {exc!r}")
            return DocumentResult(url=url, skip_reason=SkipReason.ERROR, detail=str(exc))


def build_harvester(
    settings: Settings,
    client: httpx.Client,
    repo: CaseRecordRepository | None = None,
) -> Harvester:
    """Build a Harvester sharing one HTTP client for listing and documents."""
    discovery = LinkDiscovery(ListingClient(client), settings.listing_url)
    return Harvester(discovery, build_processor(settings, client, repo))
