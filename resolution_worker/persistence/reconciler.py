from datetime import datetime

from resolution_worker.classification.models import ResolutionType
from resolution_worker.database.models import CaseRecord
from resolution_worker.database.repositories.case_record_repository import CaseRecordRepository
from resolution_worker.logging.logger import Log
from resolution_worker.processor.exceptions import DuplicateCaseError, PersistenceError
from resolution_worker.processor.models import ReconcileStatus


class CaseReconciler:
    """Upserts one case code: insert if absent, update if present.

    A case can reappear in a later resolution (a withdrawal after a concession),
    so the stored row always reflects the latest sighting.
    """

    def __init__(self, repo: CaseRecordRepository) -> None:
        self._repo = repo

    def reconcile(
        self,
        code: str,
        resolution_type: ResolutionType,
        source_url: str,
        processed_at: datetime,
    ) -> ReconcileStatus:
        """Persist one case. Store failures are logged and reported as SKIPPED."""
        record = CaseRecord(
            code=code,
            resolution_type=resolution_type.value,
            source_url=source_url,
            processed_at=processed_at,
        )
        try:
            existing = self._repo.find_by_code(code)
            if existing is None:
                return self._insert(record)
            self._repo.update(record)
        except PersistenceError as exc:
            Log.error(f"Could not save case {code} from {source_url}: {exc}")
            return ReconcileStatus.SKIPPED

        if existing.resolution_type != record.resolution_type:
            Log.info(
                f"Case {code} changed from {existing.resolution_type} "
                f"to {record.resolution_type}"
            )
        return ReconcileStatus.UPDATED

    def _insert(self, record: CaseRecord) -> ReconcileStatus:
        try:
            self._repo.insert(record)
        except DuplicateCaseError:
            Log.warning(f"Case {record.code} was created concurrently, updating instead")
            self._repo.update(record)
            return ReconcileStatus.UPDATED
        Log.debug(f"Case {record.code} created as {record.resolution_type}")
        return ReconcileStatus.CREATED
