import httpx

from resolution_worker.archive.archive import DocumentArchive
from resolution_worker.classification.classifier import ResolutionClassifier
from resolution_worker.classification.models import ResolutionType
from resolution_worker.config.settings import Settings
from resolution_worker.database.repositories.case_record_repository import CaseRecordRepository
from resolution_worker.extraction.identifiers import IdentifierExtractor
from resolution_worker.fetcher.document_fetcher import DocumentFetcher
from resolution_worker.logging.logger import Log
from resolution_worker.pdf.factory import PdfExtractorFactory
from resolution_worker.persistence.reconciler import CaseReconciler
from resolution_worker.processor.models import (
    MANUAL_UPLOAD_SOURCE,
    DocumentOutcome,
    DocumentResult,
    RawDocument,
)
from resolution_worker.processor.pipeline import PipelineContext, PipelineStep
from resolution_worker.processor.steps import (
    ArchiveStep,
    ClassifyStep,
    ExtractIdentifiersStep,
    ExtractTextStep,
    FetchStep,
    NormalizeTextStep,
    ReconcileStep,
)


class Processor:
    """Runs one document through the pipeline.

    Pipeline: fetch -> extract -> normalize -> classify -> identifiers ->
    archive -> reconcile. A step that records a skip reason ends the run for
    that document.
    """

    def __init__(self, fetch_step: PipelineStep, steps: list[PipelineStep]) -> None:
        self._fetch_step = fetch_step
        self._steps = steps

    def process_url(self, url: str) -> DocumentResult:
        """Download and process the document at url."""
        context = PipelineContext(source=url)
        return self._run([self._fetch_step, *self._steps], context)

    def process_bytes(
        self,
        content: bytes,
        source: str = MANUAL_UPLOAD_SOURCE,
        resolution_type: ResolutionType | None = None,
    ) -> DocumentResult:
        """Process a document already in memory. It is never archived again.

        Args:
            content: Raw PDF bytes.
            source: Recorded as the source of every case found.
            resolution_type: Skip classification and use this type instead.
        """
        context = PipelineContext(
            source=source,
            archive_enabled=False,
            raw_document=RawDocument(url=source, content=content),
            resolution_type=resolution_type,
        )
        return self._run(self._steps, context)

    def _run(self, steps: list[PipelineStep], context: PipelineContext) -> DocumentResult:
        for step in steps:
            context = step.run(context)
            if context.skip_reason is not None:
                Log.warning(
                    f"Skipping {context.source}: {context.skip_reason.value} ({context.detail})"
                )
                return DocumentResult(
                    url=context.source,
                    skip_reason=context.skip_reason,
                    detail=context.detail,
                )

        if context.resolution_type is None:
            raise ValueError("Pipeline finished without a resolution type")
        outcome = DocumentOutcome(
            url=context.source,
            resolution_type=context.resolution_type,
            identifiers=len(context.identifiers),
            new=context.new,
            updated=context.updated,
            skipped=context.failed,
            archived_path=context.archived_path,
        )
        return DocumentResult(url=context.source, outcome=outcome)


def build_processor(
    settings: Settings,
    client: httpx.Client,
    repo: CaseRecordRepository | None = None,
) -> Processor:
    """Build a Processor with all required adapters."""
    reconciler = CaseReconciler(repo if repo is not None else CaseRecordRepository())
    steps: list[PipelineStep] = [
        ExtractTextStep(PdfExtractorFactory.create(settings)),
        NormalizeTextStep(),
        ClassifyStep(
            ResolutionClassifier(settings.distinguish_express_withdrawal),
            whole_document=settings.classify_whole_document,
        ),
        ExtractIdentifiersStep(IdentifierExtractor(settings.program_code)),
    ]
    if settings.archive_dir is not None:
        archive = DocumentArchive(settings.archive_dir)
        archive.ensure_folders()
        steps.append(ArchiveStep(archive))
    steps.append(ReconcileStep(reconciler))
    return Processor(fetch_step=FetchStep(DocumentFetcher(client)), steps=steps)
