from abc import ABC, abstractmethod


class BasePdfExtractor(ABC):
    """Turns resolution PDF bytes into the raw text that normalization reads."""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> str:
        """Return the embedded text layer, pages joined by newlines in page order.

        Scanned documents without a text layer yield an empty string; the
        pipeline skips them as EXTRACTION_FAILED.

        Raises:
            PdfExtractionError: if the bytes cannot be parsed as a PDF.
        """
