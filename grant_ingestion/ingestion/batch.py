"""Runs every registered source, isolating per-source failures."""

import asyncio
import logging
import time
from typing import List

from ..models import SourceRunResult
from ..sources.registry import SourceRegistry
from ..sources.sample_data import generate_sample_grants
from .engine import IngestionEngine

logger = logging.getLogger(__name__)


class BatchCoordinator:
    """Fan-out over the registry with bounded parallelism.

    Sources run concurrently (at most ``max_concurrency`` at a time); a
    failing source becomes a ``success=False`` entry and never aborts its
    siblings.
    """

    def __init__(
        self,
        engine: IngestionEngine,
        registry: SourceRegistry,
        max_concurrency: int = 4,
        inject_sample_grants: bool = True,
    ):
        self.engine = engine
        self.registry = registry
        self.max_concurrency = max(1, max_concurrency)
        self.inject_sample_grants = inject_sample_grants

    async def run_all(self) -> List[SourceRunResult]:
        logger.info("=" * 60)
        logger.info("Starting ingestion cycle")
        logger.info("=" * 60)
        start = time.monotonic()

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _run(source_id: str) -> SourceRunResult:
            async with semaphore:
                try:
                    return await self.engine.run_source(source_id)
                except Exception as e:
                    logger.error(f"⚠ {source_id}: run failed: {e}")
                    return SourceRunResult(source=source_id, success=False, error=str(e) or type(e).__name__)

        results = list(await asyncio.gather(*(_run(source_id) for source_id in self.registry.ids())))

        for result in results:
            if result.success:
                logger.info(f"✓ {result.source}: {result.total} found, {result.saved} new, {result.updated} updated")

        total = sum(r.total for r in results)
        logger.info(f"Total grants found across sources: {total}")
        if total == 0 and self.inject_sample_grants:
            self._inject_samples()

        duration = time.monotonic() - start
        failed = sum(1 for r in results if not r.success)
        logger.info("=" * 60)
        logger.info(f"Ingestion cycle completed in {duration:.2f} seconds ({failed} sources failed)")
        logger.info("=" * 60)
        return results

    def _inject_samples(self) -> None:
        samples = generate_sample_grants()
        logger.warning(f"No grants found from any source; injecting {len(samples)} sample grants")
        saved, updated = self.engine.persist_candidates(samples)
        logger.info(f"✓ Sample grants stored: {saved} new, {updated} updated")
