from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from resolution_worker.classification.models import ResolutionType
from resolution_worker.processor.models import RawDocument, SkipReason


@dataclass(slots=True)
class PipelineContext:
    source: str
    archive_enabled: bool = True
    raw_document: RawDocument | None = None
    extracted_text: str = ""
    normalized_text: str = ""
    full_text: str = ""
    resolution_type: ResolutionType | None = None
    identifiers: set[str] = field(default_factory=set)
    archived_path: Path | None = None
    new: int = 0
    updated: int = 0
    failed: int = 0
    skip_reason: SkipReason | None = None
    detail: str = ""

    def skip(self, reason: SkipReason, detail: str) -> "PipelineContext":
        self.skip_reason = reason
        self.detail = detail
        return self


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
