import pymupdf

from resolution_worker.logging.logger import Log
from resolution_worker.pdf.base import BasePdfExtractor
from resolution_worker.pdf.exceptions import PdfExtractionError


class PyMuPdfAdapter(BasePdfExtractor):
    """Reads the text layer with PyMuPDF. Blocks are sorted top-left to
    bottom-right so annex table rows keep their column order."""

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text(sort=True) for page in doc]
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf could not read the document: {exc}") from exc
        blank = sum(1 for text in pages if not text.strip())
        Log.debug(f"pymupdf read {len(pages)} pages, {blank} without a text layer")
        return "\n".join(pages).strip()
