from collections.abc import Callable
from datetime import datetime, timezone

from resolution_worker.archive.archive import DocumentArchive
from resolution_worker.classification.classifier import ResolutionClassifier
from resolution_worker.classification.models import ResolutionType
from resolution_worker.extraction.identifiers import IdentifierExtractor
from resolution_worker.extraction.normalizer import normalize_text
from resolution_worker.fetcher.document_fetcher import DocumentFetcher
from resolution_worker.logging.logger import Log
from resolution_worker.pdf.base import BasePdfExtractor
from resolution_worker.persistence.reconciler import CaseReconciler
from resolution_worker.processor.exceptions import DocumentFetchError, ExtractionError
from resolution_worker.processor.models import ReconcileStatus, SkipReason
from resolution_worker.processor.pipeline import PipelineContext, PipelineStep


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FetchStep(PipelineStep):
    def __init__(self, fetcher: DocumentFetcher) -> None:
        self._fetcher = fetcher

    def run(self, context: PipelineContext) -> PipelineContext:
        try:
            raw_document = self._fetcher.fetch(context.source)
        except DocumentFetchError as exc:
            return context.skip(SkipReason.FETCH_FAILED, str(exc))
        if raw_document is None:
            return context.skip(SkipReason.NOT_A_DOCUMENT, "response is not a PDF")
        context.raw_document = raw_document
        Log.info(f"Downloaded {len(raw_document.content)} bytes from {context.source}")
        return context


class ExtractTextStep(PipelineStep):
    def __init__(self, pdf_extractor: BasePdfExtractor) -> None:
        self._pdf_extractor = pdf_extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.raw_document is None:
            raise ValueError("PipelineContext.raw_document must be set before extraction")
        try:
            context.extracted_text = self._pdf_extractor.extract(context.raw_document.content)
        except ExtractionError as exc:
            return context.skip(SkipReason.EXTRACTION_FAILED, str(exc))
        if not context.extracted_text.strip():
            return context.skip(SkipReason.EXTRACTION_FAILED, "document has no text layer")
        Log.debug(f"Extracted {len(context.extracted_text)} chars from {context.source}")
        return context


class NormalizeTextStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        context.normalized_text = normalize_text(context.extracted_text)
        context.full_text = normalize_text(context.extracted_text, isolate=False)
        return context


class ClassifyStep(PipelineStep):
    """Labels the document from its annex text. A type set beforehand
    (archive re-scan) is kept.

    With ``whole_document`` set, an unresolved annex is retried against the
    whole normalized document.
    """

    def __init__(self, classifier: ResolutionClassifier, whole_document: bool = False) -> None:
        self._classifier = classifier
        self._whole_document = whole_document

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.resolution_type is None:
            context.resolution_type = self._classify(context)
        if context.resolution_type is ResolutionType.UNRESOLVED:
            return context.skip(SkipReason.UNRESOLVED, "resolution type could not be determined")
        return context

    def _classify(self, context: PipelineContext) -> ResolutionType:
        resolution_type = self._classifier.classify(context.normalized_text)
        if (
            self._whole_document
            and resolution_type is ResolutionType.UNRESOLVED
            and context.full_text != context.normalized_text
        ):
            Log.debug(f"Annex of {context.source} is unresolved, classifying the whole document")
            resolution_type = self._classifier.classify(context.full_text)
        return resolution_type


class ExtractIdentifiersStep(PipelineStep):
    def __init__(self, extractor: IdentifierExtractor) -> None:
        self._extractor = extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        context.identifiers = self._extractor.extract(context.normalized_text)
        if not context.identifiers:
            return context.skip(SkipReason.NO_IDENTIFIERS, "no valid case codes found")
        Log.info(f"Found {len(context.identifiers)} case codes in {context.source}")
        return context


class ArchiveStep(PipelineStep):
    """Keeps a copy of downloaded documents. Write failures do not skip the document."""

    def __init__(self, archive: DocumentArchive) -> None:
        self._archive = archive

    def run(self, context: PipelineContext) -> PipelineContext:
        if not context.archive_enabled:
            return context
        if context.raw_document is None or context.resolution_type is None:
            raise ValueError("PipelineContext must be classified before archiving")
        try:
            context.archived_path = self._archive.store(
                context.raw_document.content, context.resolution_type
            )
        except OSError as exc:
            Log.warning(f"Could not archive {context.source}: {exc}")
        return context


class ReconcileStep(PipelineStep):
    def __init__(
        self,
        reconciler: CaseReconciler,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._reconciler = reconciler
        self._clock = clock

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.resolution_type is None:
            raise ValueError("PipelineContext.resolution_type must be set before persist")
        for code in sorted(context.identifiers):
            status = self._reconciler.reconcile(
                code,
                context.resolution_type,
                context.source,
                self._clock(),
            )
            if status is ReconcileStatus.CREATED:
                context.new += 1
            elif status is ReconcileStatus.UPDATED:
                context.updated += 1
            else:
                context.failed += 1
        Log.info(
            f"Saved {context.new + context.updated} cases from {context.source} "
            f"({context.new} new, {context.updated} updated, {context.failed} failed)"
        )
        return context
