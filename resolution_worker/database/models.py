from dataclasses import dataclass
from datetime import datetime


@dataclass
class CaseRecord:
    """Represents a row from the expedientes table."""

    code: str
    resolution_type: str
    source_url: str
    processed_at: datetime
    created_at: datetime | None = None
    updated_at: datetime | None = None
