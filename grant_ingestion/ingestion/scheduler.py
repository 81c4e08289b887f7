"""Recurring and on-demand ingestion triggers.

One IngestionScheduler is built at process start and handed to whoever
triggers runs (CLI, API). It owns the APScheduler instance, so the
recurring job is registered at most once per process.
"""

import logging
from typing import List, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..models import SourceRunResult
from .batch import BatchCoordinator
from .engine import IngestionEngine

logger = logging.getLogger(__name__)

RECURRING_JOB_ID = "run_all_sources"


class IngestionScheduler:
    """Process-lifetime trigger owner."""

    def __init__(self, engine: IngestionEngine, coordinator: BatchCoordinator, interval_hours: int = 6):
        self.engine = engine
        self.coordinator = coordinator
        self.interval_hours = interval_hours
        self._scheduler: Optional[AsyncIOScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None

    def start(self) -> bool:
        """Register the recurring run. Must be called from a running event loop.

        Returns:
            False (and changes nothing) when already started.
        """
        if self._scheduler is not None:
            logger.warning("Scheduler already started; recurring job not registered again")
            return False

        scheduler = AsyncIOScheduler()
        scheduler.add_job(
            self.scheduled_run,
            trigger=IntervalTrigger(hours=self.interval_hours),
            id=RECURRING_JOB_ID,
            name="Run all grant sources",
            replace_existing=True,
            max_instances=1,  # Prevent overlapping scheduled runs
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info(f"✓ Scheduler started - scraping will run every {self.interval_hours} hours")
        return True

    def shutdown(self) -> None:
        if self._scheduler is None:
            return
        logger.info("Shutting down scheduler...")
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("✓ Scheduler stopped")

    def jobs(self) -> list:
        return self._scheduler.get_jobs() if self._scheduler else []

    async def scheduled_run(self) -> None:
        """Fire-and-forget batch run; failures are logged, never raised."""
        logger.info("Running scheduled scraping job...")
        try:
            results = await self.coordinator.run_all()
        except Exception as e:
            logger.error(f"Error in scheduled scraping job: {e}", exc_info=True)
            return
        failed = [r.source for r in results if not r.success]
        if failed:
            logger.warning(f"Scheduled scraping job completed with failed sources: {', '.join(failed)}")
        else:
            logger.info("Scheduled scraping job completed")

    async def run_source(self, source_id: str) -> SourceRunResult:
        """On-demand single source run; errors propagate to the caller."""
        return await self.engine.run_source(source_id)

    async def run_all(self) -> List[SourceRunResult]:
        """On-demand run of every source."""
        return await self.coordinator.run_all()
