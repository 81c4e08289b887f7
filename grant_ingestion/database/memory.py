"""In-process grant store used when no Supabase project is configured."""

import logging
import threading
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..errors import JobAlreadyCompleted
from ..models import JobRecord, PersistedGrant, as_utc, utc_now
from .base import GrantStore

logger = logging.getLogger(__name__)


class InMemoryStore(GrantStore):
    """Dict-backed store; a single lock makes every operation atomic."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._grants: Dict[str, PersistedGrant] = {}
        self._jobs: Dict[str, JobRecord] = {}

    # ------------------------------------------------------------------
    # Grants
    # ------------------------------------------------------------------

    def find_grant_by_url(self, url: str) -> Optional[PersistedGrant]:
        with self._lock:
            grant = self._grants.get(url)
            return grant.model_copy() if grant else None

    def upsert_grant(self, grant: PersistedGrant) -> PersistedGrant:
        with self._lock:
            existing = self._grants.get(grant.url)
            if existing is not None:
                grant = grant.model_copy(update={"created_at": existing.created_at})
            self._grants[grant.url] = grant
        logger.debug("Upserted grant %s", grant.url)
        return grant.model_copy()

    def deactivate_expired(self, source: str, as_of: datetime) -> int:
        as_of = as_utc(as_of)
        count = 0
        with self._lock:
            for url, grant in self._grants.items():
                if (
                    grant.source == source
                    and grant.is_active
                    and grant.deadline is not None
                    and grant.deadline < as_of
                ):
                    self._grants[url] = grant.model_copy(update={"is_active": False})
                    count += 1
        if count:
            logger.info("Deactivated %d expired grants for %s", count, source)
        return count

    def all_grants(self) -> List[PersistedGrant]:
        with self._lock:
            return [g.model_copy() for g in self._grants.values()]

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------

    def create_job(self, source: str) -> JobRecord:
        job = JobRecord(id=uuid.uuid4().hex, source=source, started_at=utc_now())
        with self._lock:
            self._jobs[job.id] = job
        return job.model_copy()

    def update_job(self, job_id: str, fields: Dict[str, Any]) -> JobRecord:
        with self._lock:
            job = self._jobs[job_id]
            if job.is_terminal:
                raise JobAlreadyCompleted(job_id, job.status.value)
            updated = JobRecord(**{**job.model_dump(), **fields})
            self._jobs[job_id] = updated
        return updated.model_copy()

    def list_jobs(self, limit: int = 10) -> List[JobRecord]:
        with self._lock:
            # Reversed insertion order breaks started_at ties newest-first.
            jobs = sorted(reversed(list(self._jobs.values())), key=lambda j: j.started_at, reverse=True)
            return [j.model_copy() for j in jobs[:max(0, limit)]]
