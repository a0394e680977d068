import sys

from resolution_worker.archive.archive import DocumentArchive
from resolution_worker.archive.reprocessor import ArchiveReprocessor
from resolution_worker.config.settings import Settings
from resolution_worker.database.connection import close_pool, init_pool
from resolution_worker.database.repositories.case_record_repository import CaseRecordRepository
from resolution_worker.harvester.harvester import build_harvester
from resolution_worker.http.client import build_http_client
from resolution_worker.logging.logger import Log
from resolution_worker.processor.exceptions import FatalDiscoveryError
from resolution_worker.processor.models import BatchSummary, DocumentOutcome
from resolution_worker.processor.processor import build_processor


def _log_outcome(outcome: DocumentOutcome) -> None:
    Log.info(
        f"{outcome.url}: {outcome.resolution_type.name}, "
        f"{outcome.records} cases ({outcome.new} new, {outcome.updated} updated)"
    )


def _log_summary(summary: BatchSummary) -> None:
    Log.info(f"Documents found: {summary.total}")
    Log.info(f"Documents processed: {summary.processed}")
    for outcome in summary.outcomes:
        _log_outcome(outcome)
    for reason, count in summary.skipped.items():
        Log.info(f"Skipped ({reason.value}): {count}")


def main() -> int:
    """Entry point: settings -> pool -> store check -> harvest -> summary."""
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        repo = CaseRecordRepository()
        if not repo.check_connection():
            return 1
        with build_http_client(settings) as client:
            harvester = build_harvester(settings, client, repo)
            try:
                summary = harvester.run()
            except FatalDiscoveryError as exc:
                Log.error(f"Harvest aborted: {exc}")
                return 1
        _log_summary(summary)
        return 0
    finally:
        close_pool()


def reprocess() -> int:
    """Entry point: re-scan ARCHIVE_DIR and reconcile every archived document."""
    settings = Settings()
    Log.configure(settings.log_level)
    if settings.archive_dir is None:
        Log.error("ARCHIVE_DIR is not set, nothing to reprocess")
        return 1
    init_pool(settings)

    try:
        repo = CaseRecordRepository()
        if not repo.check_connection():
            return 1
        with build_http_client(settings) as client:
            processor = build_processor(settings, client, repo)
            outcomes = ArchiveReprocessor(DocumentArchive(settings.archive_dir), processor).run()
        for outcome in outcomes:
            _log_outcome(outcome)
        return 0
    finally:
        close_pool()


if __name__ == "__main__":
    sys.exit(main())
