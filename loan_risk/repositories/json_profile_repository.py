"""JSON-file implementation of the scoring profile repository."""

import json
import logging
import os
from pathlib import Path
import tempfile
from typing import Any, Dict, Union

from .memory_profile_repository import InMemoryScoringProfileRepository


logger = logging.getLogger(__name__)


class JsonFileScoringProfileRepository(InMemoryScoringProfileRepository):
    """Persist profile documents to a single JSON file.

    Every call re-reads the file, so each operation sees whatever the file holds
    at that moment. Writes go to a temporary file that then replaces the store file.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__()
        self._path = Path(path)
        logger.info("Initialized JsonFileScoringProfileRepository path=%s", self._path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_documents(self) -> Dict[str, Dict[str, Any]]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except json.JSONDecodeError:
            logger.exception("Invalid JSON in profile store path=%s", self._path)
            raise
        profiles = payload.get("profiles", []) if isinstance(payload, dict) else payload
        return {str(document["id"]): document for document in profiles}

    def _write_documents(self, documents: Dict[str, Dict[str, Any]]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        handle, temp_path = tempfile.mkstemp(dir=str(self._path.parent), prefix=".profiles-", suffix=".json")
        try:
            with os.fdopen(handle, "w", encoding="utf-8") as stream:
                json.dump({"profiles": list(documents.values())}, stream, indent=2)
            os.replace(temp_path, self._path)
        except OSError:
            logger.exception("Failed to write profile store path=%s", self._path)
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise
