import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List

from studysprint.core.errors import PersistenceError

logger = logging.getLogger(__name__)


class JsonGoalStorage:
    """
    Durable storage for the goal collection: one JSON array in one file,
    read whole on startup and rewritten whole after every mutation.
    """

    def __init__(self, path: str):
        self.path = Path(path)

    def load(self) -> List[Dict[str, Any]]:
        """
        Reads every stored record.

        Returns:
            List[Dict[str, Any]]: Raw records in stored order. A missing file is
            treated as a first run: an empty file is written and [] returned.

        Raises:
            PersistenceError: If the file exists but cannot be read or parsed.
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info(f"No goals data at {self.path}, starting with an empty collection")
            self.save([])
            return []
        except OSError as e:
            raise PersistenceError(f"Failed to read goals data from {self.path}: {e}") from e

        try:
            parsed = json.loads(raw)
        except ValueError as e:
            raise PersistenceError(f"Goals data in {self.path} is not valid JSON: {e}") from e

        if not isinstance(parsed, list):
            logger.warning(f"Goals data in {self.path} is not a list, ignoring it")
            return []
        return parsed

    def save(self, records: List[Dict[str, Any]]) -> None:
        """
        Rewrites the data file with the given records.

        Raises:
            PersistenceError: If the file cannot be written.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".goals-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(json.dumps(records, indent=2, ensure_ascii=False))
                    fh.write("\n")
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as e:
            raise PersistenceError(f"Failed to write goals data to {self.path}: {e}") from e
