"""Supabase-backed grant store."""

import logging
import os
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from supabase import Client, create_client

from ..errors import JobAlreadyCompleted
from ..models import JobRecord, JobStatus, PersistedGrant, utc_now
from .base import GrantStore

logger = logging.getLogger(__name__)

GRANTS_TABLE = "grants"
JOBS_TABLE = "scraping_jobs"


class SupabaseStore(GrantStore):
    """Client for the Supabase grants and scraping_jobs tables.

    ``grants.url`` carries a unique constraint; upserts resolve on it so
    concurrent writers cannot create duplicate rows.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        key: Optional[str] = None,
    ) -> None:
        """Initialize Supabase client from explicit args or env vars.

        Args:
            url: Supabase project URL (falls back to SUPABASE_URL env var).
            key: Supabase anon/service key (falls back to SUPABASE_KEY env var).
        """
        self._url = url or os.environ["SUPABASE_URL"]
        self._key = key or os.environ["SUPABASE_KEY"]
        self._client: Client = create_client(self._url, self._key)

    # ------------------------------------------------------------------
    # Grants
    # ------------------------------------------------------------------

    def find_grant_by_url(self, url: str) -> Optional[PersistedGrant]:
        response = (
            self._client.table(GRANTS_TABLE)
            .select("*")
            .eq("url", url)
            .limit(1)
            .execute()
        )
        return PersistedGrant(**response.data[0]) if response.data else None

    def upsert_grant(self, grant: PersistedGrant) -> PersistedGrant:
        """Insert or overwrite a grant keyed by url.

        created_at is left to the column default so an update never
        rewrites it.
        """
        record = grant.model_dump(mode="json", exclude={"created_at"})
        response = (
            self._client.table(GRANTS_TABLE)
            .upsert(record, on_conflict="url")
            .execute()
        )
        logger.info("Upserted grant %s", grant.url)
        return PersistedGrant(**response.data[0]) if response.data else grant

    def deactivate_expired(self, source: str, as_of: datetime) -> int:
        response = (
            self._client.table(GRANTS_TABLE)
            .update({"is_active": False, "updated_at": utc_now().isoformat()})
            .eq("source", source)
            .eq("is_active", True)
            .lt("deadline", as_of.isoformat())
            .execute()
        )
        count = len(response.data or [])
        if count:
            logger.info("Deactivated %d expired grants for %s", count, source)
        return count

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------

    def create_job(self, source: str) -> JobRecord:
        job = JobRecord(id=str(uuid.uuid4()), source=source, started_at=utc_now())
        response = (
            self._client.table(JOBS_TABLE)
            .insert(job.model_dump(mode="json"))
            .execute()
        )
        logger.info("Created scraping job %s for %s", job.id, source)
        return JobRecord(**response.data[0]) if response.data else job

    def update_job(self, job_id: str, fields: Dict[str, Any]) -> JobRecord:
        """Transition a running job; the status filter makes this a compare-and-swap."""
        payload = {
            k: (v.value if isinstance(v, JobStatus) else v.isoformat() if isinstance(v, datetime) else v)
            for k, v in fields.items()
        }
        response = (
            self._client.table(JOBS_TABLE)
            .update(payload)
            .eq("id", job_id)
            .eq("status", JobStatus.RUNNING.value)
            .execute()
        )
        if not response.data:
            raise JobAlreadyCompleted(job_id, "unknown")
        return JobRecord(**response.data[0])

    def list_jobs(self, limit: int = 10) -> List[JobRecord]:
        response = (
            self._client.table(JOBS_TABLE)
            .select("*")
            .order("started_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [JobRecord(**row) for row in response.data]
