from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from resolution_worker.classification.models import ResolutionType

PDF_CONTENT_TYPE = "application/pdf"
MANUAL_UPLOAD_SOURCE = "subido_manualmente"


@dataclass(frozen=True)
class RawDocument:
    """Downloaded document bytes with the declared media type."""

    url: str
    content: bytes
    content_type: str = PDF_CONTENT_TYPE


class SkipReason(str, Enum):
    FETCH_FAILED = "fetch_failed"
    NOT_A_DOCUMENT = "not_a_document"
    EXTRACTION_FAILED = "extraction_failed"
    UNRESOLVED = "unresolved"
    NO_IDENTIFIERS = "no_identifiers"
    ERROR = "error"


class ReconcileStatus(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class DocumentOutcome:
    """Result of one document that yielded case codes."""

    url: str
    resolution_type: ResolutionType
    identifiers: int
    new: int
    updated: int
    skipped: int = 0
    archived_path: Path | None = None

    @property
    def records(self) -> int:
        return self.new + self.updated


@dataclass(frozen=True)
class DocumentResult:
    """Typed per-document result: either an outcome or a skip reason."""

    url: str
    outcome: DocumentOutcome | None = None
    skip_reason: SkipReason | None = None
    detail: str = ""


@dataclass
class BatchSummary:
    """Aggregate of a harvesting run."""

    total: int
    outcomes: list[DocumentOutcome] = field(default_factory=list)
    skipped: dict[SkipReason, int] = field(default_factory=dict)

    @property
    def processed(self) -> int:
        return len(self.outcomes)

    def add(self, result: DocumentResult) -> None:
        if result.outcome is not None:
            self.outcomes.append(result.outcome)
        elif result.skip_reason is not None:
            self.skipped[result.skip_reason] = self.skipped.get(result.skip_reason, 0) + 1
