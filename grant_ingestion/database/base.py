"""Persistence interface consumed by the ingestion engine."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..models import JobRecord, PersistedGrant


class GrantStore(ABC):
    """Grant and job storage.

    ``upsert_grant`` must be atomic per ``url``: concurrent writers never
    create two rows for the same URL.
    """

    @abstractmethod
    def find_grant_by_url(self, url: str) -> Optional[PersistedGrant]:
        pass

    @abstractmethod
    def upsert_grant(self, grant: PersistedGrant) -> PersistedGrant:
        """Create the row, or overwrite every mutable field of the existing one."""
        pass

    @abstractmethod
    def deactivate_expired(self, source: str, as_of: datetime) -> int:
        """Mark inactive the active grants of ``source`` whose deadline is before ``as_of``.

        Grants without a deadline are never touched.

        Returns:
            Number of grants deactivated.
        """
        pass

    @abstractmethod
    def create_job(self, source: str) -> JobRecord:
        pass

    @abstractmethod
    def update_job(self, job_id: str, fields: Dict[str, Any]) -> JobRecord:
        """Apply fields to a running job.

        Raises:
            JobAlreadyCompleted: if the job already reached a terminal state.
        """
        pass

    @abstractmethod
    def list_jobs(self, limit: int = 10) -> List[JobRecord]:
        """Most recent jobs first (by started_at)."""
        pass
