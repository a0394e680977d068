from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

from resolution_worker.classification.models import ResolutionType
from resolution_worker.logging.logger import Log


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentArchive:
    """Stores raw document bytes under one folder per resolution type.

    Layout: {root}/{folder name}/{TYPE}_{timestamp}.pdf
    """

    def __init__(self, root: Path, clock: Callable[[], datetime] = _utcnow) -> None:
        self._root = root
        self._clock = clock

    def folder_for(self, resolution_type: ResolutionType) -> Path:
        return self._root / resolution_type.folder_name

    def ensure_folders(self) -> None:
        for resolution_type in ResolutionType.resolved():
            folder = self.folder_for(resolution_type)
            if not folder.exists():
                folder.mkdir(parents=True, exist_ok=True)
                Log.info(f"Created archive folder {folder}")

    def store(self, content: bytes, resolution_type: ResolutionType) -> Path:
        """Write content to the type's folder and return the new file path.

        Raises:
            OSError: if the file cannot be written.
        """
        folder = self.folder_for(resolution_type)
        folder.mkdir(parents=True, exist_ok=True)
        timestamp = self._clock().strftime("%Y-%m-%dT%H-%M-%S-%f")
        path = folder / f"{resolution_type.name}_{timestamp}.pdf"
        path.write_bytes(content)
        Log.info(f"Archived document at {path}")
        return path

    def list_documents(self, resolution_type: ResolutionType) -> list[Path]:
        """Archived PDFs of one type, sorted by name. Empty if the folder is missing."""
        folder = self.folder_for(resolution_type)
        if not folder.is_dir():
            return []
        return sorted(
            path for path in folder.iterdir() if path.is_file() and path.suffix.lower() == ".pdf"
        )
