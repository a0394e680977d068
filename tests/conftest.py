import io
from collections.abc import Callable
from dataclasses import replace

import pytest
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from resolution_worker.config.settings import Settings
from resolution_worker.database.models import CaseRecord
from resolution_worker.processor.exceptions import DuplicateCaseError, PersistenceError

LISTING_URL = "https://sede.example.gob.es/convocatorias/kit-digital"


def _render_pdf(pages: list[list[str]]) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    for lines in pages:
        y = 780
        for line in lines:
            c.drawString(72, y, line)
            y -= 18
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def make_pdf() -> Callable[[list[list[str]]], bytes]:
    """Render a PDF with one list of text lines per page."""
    return _render_pdf


@pytest.fixture()
def concession_pdf_bytes() -> bytes:
    """A two-page concession resolution whose annex lists two cases."""
    return _render_pdf(
        [
            [
                "RESOLUCION DE CONCESION DE AYUDAS KIT DIGITAL",
                "Expediente de referencia 2023/C022/99999999 citado en la convocatoria",
            ],
            [
                "ANEXO I - RELACION DE EXPEDIENTES DE CONCESION",
                "2024/C022/00000123 01/01/2024 500,00 EUR",
                "2024/C022/00000456 02/01/2024 1.200,00 EUR",
            ],
        ]
    )


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    monkeypatch.setenv("LISTING_URL", LISTING_URL)
    monkeypatch.setenv("DB_USERNAME", "resolutions")
    monkeypatch.setenv("DB_PASSWORD", "secret")
    monkeypatch.delenv("DB_DATABASE", raising=False)
    return Settings(_env_file=None)


class InMemoryCaseRecordRepository:
    """Dict-backed stand-in for CaseRecordRepository with the same contract."""

    def __init__(self) -> None:
        self.records: dict[str, CaseRecord] = {}
        self.failing_codes: set[str] = set()

    def find_by_code(self, code: str) -> CaseRecord | None:
        if code in self.failing_codes:
            raise PersistenceError(f"Lookup of case {code} failed: connection reset")
        record = self.records.get(code)
        return replace(record) if record is not None else None

    def insert(self, record: CaseRecord) -> None:
        if record.code in self.records:
            raise DuplicateCaseError(f"Case {record.code} already exists")
        self.records[record.code] = replace(record)

    def update(self, record: CaseRecord) -> None:
        if record.code not in self.records:
            raise PersistenceError(f"Case {record.code} not found for update")
        self.records[record.code] = replace(record)

    def check_connection(self) -> bool:
        return True


@pytest.fixture()
def case_repo() -> InMemoryCaseRecordRepository:
    return InMemoryCaseRecordRepository()
