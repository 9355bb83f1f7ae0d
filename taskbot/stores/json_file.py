"""Atomic JSON state file shared by the persistent stores."""

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class JsonStateFile:
    """A JSON object persisted to one file.

    Writes go to a temp file first and are renamed into place so a crash never
    leaves a half-written state file behind.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def load(self) -> dict[str, Any]:
        """Read the file; a missing or corrupted file reads as empty."""
        if not self.path.exists():
            logger.debug(f"State file does not exist: {self.path}")
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Corrupted state file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.error(f"Invalid state format (expected dict): {self.path}")
            return {}
        return data

    def save(self, data: dict[str, Any]) -> None:
        tmp_path = self.path.with_suffix(".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, default=str)
        tmp_path.rename(self.path)
