"""Session Persistence - Keep the last SessionReport on disk between runs."""

import json
import os
import logging
import tempfile

from .game_state import SessionReport

logger = logging.getLogger(__name__)


class SessionPersistence:
    """One JSON document holding the most recent run's report.

    Writes go through a temp file in the target directory, so a crash
    mid-write leaves the previous report intact.
    """

    def __init__(self, file_path: str) -> None:
        self.file_path = file_path

    def save(self, report: SessionReport) -> None:
        directory = os.path.dirname(self.file_path) or "."
        os.makedirs(directory, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(
            prefix=".session-", suffix=".tmp", dir=directory
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(report.to_dict(), f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.file_path)
        except Exception as e:
            logger.error(f"Could not write session report to {self.file_path}: {e}")
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        logger.debug(f"Session report written: {report.summary()}")

    def load(self) -> dict | None:
        """Raw report dict, or None when absent, unreadable or not an object."""
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session report {self.file_path}: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Ignoring session report {self.file_path}: not a JSON object")
            return None
        return data

    def load_report(self) -> SessionReport | None:
        data = self.load()
        return SessionReport.from_dict(data) if data is not None else None
