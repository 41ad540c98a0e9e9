import logging
from datetime import datetime
from pathlib import Path
from typing import List

from memo_core.exceptions import RecordingError

logger = logging.getLogger(__name__)

RECORDING_SUFFIX = ".m4a"
FILENAME_FORMAT = "%d-%m-%y_at_%H-%M-%S"


class RecordingLibrary:
    """Bookkeeping for recorded audio files kept in one directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.exception("Cannot create recordings directory %s", self.directory)
            raise RecordingError(str(exc)) from exc

    def new_recording_path(self, now: datetime) -> Path:
        return self.directory / f"{now.strftime(FILENAME_FORMAT)}{RECORDING_SUFFIX}"

    # PUBLIC_INTERFACE
    def list_recordings(self) -> List[Path]:
        """All recordings in the directory, sorted by file name."""
        try:
            return sorted(p for p in self.directory.iterdir() if p.suffix == RECORDING_SUFFIX and p.is_file())
        except OSError as exc:
            logger.exception("Failed to list recordings in %s", self.directory)
            raise RecordingError(str(exc)) from exc

    # PUBLIC_INTERFACE
    def delete(self, path: Path) -> None:
        try:
            Path(path).unlink()
        except OSError as exc:
            logger.exception("Delete failed for recording %s", path)
            raise RecordingError(str(exc)) from exc
        logger.info("Deleted recording %s", Path(path).name)
