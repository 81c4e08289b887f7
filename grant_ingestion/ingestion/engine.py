"""Runs one source to completion and records its job outcome."""

import logging
import time
from typing import Iterable, Tuple

from ..adapters.strategy import RSSFirstStrategy
from ..database.base import GrantStore
from ..models import CandidateRecord, JobStatus, PersistedGrant, SourceRunResult, utc_now
from ..sources.registry import SourceRegistry

logger = logging.getLogger(__name__)


class IngestionEngine:
    """Turns a source's candidates into persisted grants plus a JobRecord."""

    def __init__(self, store: GrantStore, registry: SourceRegistry, strategy: RSSFirstStrategy):
        self.store = store
        self.registry = registry
        self.strategy = strategy

    async def run_source(self, source_id: str) -> SourceRunResult:
        """Run a scraping job for one source.

        Args:
            source_id: Registry id of the source.

        Returns:
            SourceRunResult with saved (created), updated and total counts.

        Raises:
            SourceNotFound: if source_id is not registered. No job is created.
            Exception: anything escaping extraction, persistence or the
                expiry pass, after the job has been marked failed.
        """
        source = self.registry.get(source_id)
        job = self.store.create_job(source_id)
        start = time.monotonic()
        logger.info(f"Running scraper: {source_id} (job {job.id})")

        try:
            candidates = await self.strategy.run(source)
            saved, updated = self.persist_candidates(candidates)
            self.store.deactivate_expired(source_id, utc_now())
            self.store.update_job(job.id, {
                "status": JobStatus.SUCCESS,
                "grants_found": saved,
                "completed_at": utc_now(),
            })
        except Exception as e:
            logger.error(f"Scraping job {job.id} for {source_id} failed: {e}", exc_info=True)
            self._mark_failed(job.id, e)
            raise

        duration = time.monotonic() - start
        logger.info(
            f"job_complete source={source_id} result=success saved={saved} "
            f"updated={updated} total={len(candidates)} duration={duration:.2f}s"
        )
        return SourceRunResult(source=source_id, saved=saved, updated=updated, total=len(candidates))

    def persist_candidates(self, candidates: Iterable[CandidateRecord]) -> Tuple[int, int]:
        """Create or overwrite one grant per candidate URL.

        A failing candidate is logged and skipped; the rest still land.

        Returns:
            (saved, updated) counts.
        """
        saved = 0
        updated = 0
        for candidate in candidates:
            try:
                now = utc_now()
                existing = self.store.find_grant_by_url(candidate.url)
                grant = PersistedGrant.from_candidate(
                    candidate,
                    now,
                    created_at=existing.created_at if existing else None,
                )
                self.store.upsert_grant(grant)
            except Exception as e:
                logger.error(f"Error processing grant {candidate.url}: {e}", exc_info=True)
                continue

            if existing:
                updated += 1
            else:
                saved += 1
        return saved, updated

    def _mark_failed(self, job_id: str, error: Exception) -> None:
        try:
            self.store.update_job(job_id, {
                "status": JobStatus.FAILED,
                "error": str(error) or type(error).__name__,
                "completed_at": utc_now(),
            })
        except Exception as e:
            logger.error(f"Could not record failure for job {job_id}: {e}")
