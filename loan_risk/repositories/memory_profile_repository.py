"""In-memory implementation of the scoring profile repository."""

import logging
from threading import RLock
from typing import Any, Dict, List
from uuid import uuid4

from pydantic import ValidationError

from loan_risk.models.exceptions import ModelNotFoundError, ModelValidationError, VersionConflictError
from loan_risk.models.profiles import ScoringProfile
from loan_risk.models.repositories import ScoringProfileRepository


logger = logging.getLogger(__name__)


class InMemoryScoringProfileRepository(ScoringProfileRepository):
    """Keep profile documents in a process-local mapping.

    Profiles are stored as serialized documents, so callers never share a model
    instance with the store. Subclasses change the storage medium by overriding
    ``_read_documents`` and ``_write_documents``.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._documents: Dict[str, Dict[str, Any]] = {}

    def _read_documents(self) -> Dict[str, Dict[str, Any]]:
        return dict(self._documents)

    def _write_documents(self, documents: Dict[str, Dict[str, Any]]) -> None:
        self._documents = dict(documents)

    @staticmethod
    def _to_model(document: Dict[str, Any]) -> ScoringProfile:
        return ScoringProfile.from_document(document, doc_id=document.get("id"))

    def create(self, model: ScoringProfile) -> ScoringProfile:
        """Persist a new profile, assigning an id when it has none."""
        with self._lock:
            try:
                documents = self._read_documents()
                profile_id = model.id or uuid4().hex
                if profile_id in documents:
                    raise VersionConflictError("Profile already exists: {0}".format(profile_id))
                payload = model.to_document()
                payload["id"] = profile_id
                documents[profile_id] = payload
                self._write_documents(documents)
                logger.info("Created scoring profile profile_id=%s", profile_id)
                return self._to_model(payload)
            except (VersionConflictError, ModelValidationError):
                raise
            except Exception:
                logger.exception("Failed to create scoring profile name=%s", model.name)
                raise

    def get_by_id(self, model_id: str) -> ScoringProfile:
        """Fetch a non-deleted profile.

        Raises:
            ModelNotFoundError: If the profile does not exist or is deleted.
        """
        with self._lock:
            document = self._read_documents().get(model_id)
            if document is None or document.get("is_deleted"):
                raise ModelNotFoundError("Scoring profile not found: {0}".format(model_id))
            return self._to_model(document)

    def update(self, model: ScoringProfile) -> ScoringProfile:
        """Replace a profile document using optimistic version checks.

        Raises:
            ModelNotFoundError: If the profile does not exist or is deleted.
            VersionConflictError: If the version is stale.
        """
        with self._lock:
            try:
                documents = self._read_documents()
                current = documents.get(model.id or "")
                if current is None or current.get("is_deleted"):
                    raise ModelNotFoundError("Scoring profile not found: {0}".format(model.id))
                if model.version <= int(current.get("version", 1)):
                    raise VersionConflictError("Version conflict for profile_id={0}".format(model.id))
                payload = model.to_document()
                documents[model.id] = payload
                self._write_documents(documents)
                return self._to_model(payload)
            except (ModelNotFoundError, VersionConflictError, ModelValidationError):
                raise
            except ValidationError:
                logger.exception("Profile validation failed while updating profile_id=%s", model.id)
                raise
            except Exception:
                logger.exception("Failed to update profile_id=%s", model.id)
                raise

    def soft_delete(self, model_id: str) -> None:
        """Soft delete a profile by marking ``is_deleted=True``."""
        with self._lock:
            documents = self._read_documents()
            current = documents.get(model_id)
            if current is None or current.get("is_deleted"):
                raise ModelNotFoundError("Scoring profile not found: {0}".format(model_id))
            documents[model_id] = dict(current, is_deleted=True, version=int(current.get("version", 1)) + 1)
            self._write_documents(documents)
            logger.info("Soft deleted scoring profile profile_id=%s", model_id)

    def list_profiles(self) -> List[ScoringProfile]:
        with self._lock:
            return [
                self._to_model(document)
                for document in self._read_documents().values()
                if not document.get("is_deleted")
            ]
