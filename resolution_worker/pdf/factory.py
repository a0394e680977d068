from resolution_worker.config.settings import PdfEngine, Settings
from resolution_worker.logging.logger import Log
from resolution_worker.pdf.base import BasePdfExtractor
from resolution_worker.pdf.pdfplumber_adapter import PdfPlumberAdapter
from resolution_worker.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfExtractorFactory:
    """Builds the text extractor selected by PDF_ENGINE.

    Settings rejects unknown engine names at startup, so every ``PdfEngine``
    value has an adapter here.
    """

    ADAPTERS: dict[PdfEngine, type[BasePdfExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor:
        adapter_cls = cls.ADAPTERS[settings.pdf_engine]
        Log.debug(f"Extracting PDF text with {settings.pdf_engine} ({adapter_cls.__name__})")
        return adapter_cls()
