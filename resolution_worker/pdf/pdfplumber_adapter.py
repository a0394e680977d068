import io

import pdfplumber

from resolution_worker.logging.logger import Log
from resolution_worker.pdf.base import BasePdfExtractor
from resolution_worker.pdf.exceptions import PdfExtractionError


class PdfPlumberAdapter(BasePdfExtractor):
    """Reads the text layer with pdfplumber, page by page in page order."""

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber could not read the document: {exc}") from exc
        blank = sum(1 for text in pages if not text.strip())
        Log.debug(f"pdfplumber read {len(pages)} pages, {blank} without a text layer")
        return "\n".join(pages).strip()
