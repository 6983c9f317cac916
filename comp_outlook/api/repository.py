# comp_outlook/api/repository.py
"""
Job persistence boundary. The engine only reads jobs; storage, ownership and
status live behind ``JobRepository``.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Protocol, Sequence, Union

from comp_outlook.exceptions import RepositoryError

logger = logging.getLogger(__name__)

OFFER_STATUS = "offer"


class JobRepository(Protocol):
    def find_jobs(self, user_id: str) -> List[Mapping[str, Any]]:
        """All job documents owned by ``user_id``."""
        ...

    def find_offer_jobs(self, user_id: str, job_ids: Sequence[str]) -> List[Mapping[str, Any]]:
        """Jobs among ``job_ids`` owned by ``user_id`` whose status is "offer"."""
        ...


def _doc_id(doc: Mapping[str, Any]) -> str:
    for key in ("_id", "id", "jobId"):
        if doc.get(key) is not None:
            return str(doc[key])
    return ""


class InMemoryJobRepository:
    """Job documents held in a list; used by tests and the CLI."""

    def __init__(self, jobs: Iterable[Mapping[str, Any]] = ()):
        self._jobs: List[Dict[str, Any]] = [dict(j) for j in jobs]

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "InMemoryJobRepository":
        """Load a JSON array of job documents (or ``{"jobs": [...]}``)."""
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise RepositoryError(f"Could not read jobs from {path}: {e}") from e
        if isinstance(data, Mapping):
            data = data.get("jobs", [])
        if not isinstance(data, list):
            raise RepositoryError(f"Expected a list of jobs in {path}, got {type(data).__name__}")
        logger.info(f"Loaded {len(data)} job document(s) from {path}")
        return cls(d for d in data if isinstance(d, Mapping))

    def all_jobs(self) -> List[Dict[str, Any]]:
        return list(self._jobs)

    def find_jobs(self, user_id: str) -> List[Dict[str, Any]]:
        return [j for j in self._jobs if str(j.get("userId")) == str(user_id)]

    def find_offer_jobs(self, user_id: str, job_ids: Sequence[str]) -> List[Dict[str, Any]]:
        wanted = {str(i) for i in job_ids}
        return [
            j
            for j in self.find_jobs(user_id)
            if _doc_id(j) in wanted and j.get("status") == OFFER_STATUS
        ]
