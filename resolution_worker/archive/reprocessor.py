from pathlib import Path

from resolution_worker.archive.archive import DocumentArchive
from resolution_worker.classification.models import ResolutionType
from resolution_worker.logging.logger import Log
from resolution_worker.processor.models import DocumentOutcome, DocumentResult
from resolution_worker.processor.processor import Processor


class ArchiveReprocessor:
    """Re-runs extraction and persistence over previously archived documents.

    The folder a file sits in decides its resolution type. A file that cannot
    be read or processed is logged and skipped.
    """

    def __init__(self, archive: DocumentArchive, processor: Processor) -> None:
        self._archive = archive
        self._processor = processor

    def run(self) -> list[DocumentOutcome]:
        outcomes: list[DocumentOutcome] = []
        for resolution_type in ResolutionType.resolved():
            paths = self._archive.list_documents(resolution_type)
            Log.info(f"Found {len(paths)} archived documents in {resolution_type.folder_name}")
            for path in paths:
                result = self._reprocess(path, resolution_type)
                if result is not None and result.outcome is not None:
                    outcomes.append(result.outcome)
        Log.info(f"Reprocessed {len(outcomes)} archived documents")
        return outcomes

    def _reprocess(self, path: Path, resolution_type: ResolutionType) -> DocumentResult | None:
        try:
            content = path.read_bytes()
        except OSError as exc:
            Log.error(f"Could not read archived document {path}: {exc}")
            return None
        try:
            return self._processor.process_bytes(
                content, source=str(path), resolution_type=resolution_type
            )
        except Exception as exc:
            Log.exception(f"Unexpected error reprocessing {path}: {exc!r}")
            return None
