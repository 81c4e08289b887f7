"""Grant ingestion entry point.

Modes:
- default: recurring scheduler (every SCRAPE_INTERVAL_HOURS) plus an initial cycle
- --once: run every source once and exit
- --source ID: run a single source once and exit
- --serve: run the HTTP trigger API under uvicorn
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from .config import load_config
from .ingestion.runtime import Runtime, build_runtime

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


async def run_once(runtime: Runtime) -> int:
    """Run all sources once (for testing and manual execution)."""
    results = await runtime.scheduler.run_all()
    for result in results:
        if result.success:
            logger.info(f"{result.source}: saved={result.saved} updated={result.updated} total={result.total}")
        else:
            logger.warning(f"{result.source}: failed ({result.error})")
    return 0


async def run_single(runtime: Runtime, source_id: str) -> int:
    try:
        result = await runtime.scheduler.run_source(source_id)
    except Exception as e:
        logger.error(f"Scraping job for {source_id} failed: {e}")
        return 1
    logger.info(f"{source_id}: saved={result.saved} updated={result.updated} total={result.total}")
    return 0


async def run_forever(runtime: Runtime) -> None:
    """Start the recurring scheduler, run a first cycle immediately, keep running."""
    logger.info("Initializing Grant Ingestion Service")
    if not runtime.config.scheduler_enabled:
        logger.warning("Scheduler disabled in production (set ENABLE_SCHEDULER=true); running a single cycle")
        await runtime.scheduler.scheduled_run()
        return

    logger.info(f"Scrape interval: {runtime.config.scrape_interval_hours} hours")
    runtime.scheduler.start()
    logger.info("Running initial scraping cycle...")
    await runtime.scheduler.scheduled_run()

    try:
        await asyncio.Event().wait()
    finally:
        runtime.scheduler.shutdown()


def serve(runtime: Runtime, host: str, port: int) -> None:
    import uvicorn

    from .api import create_app

    uvicorn.run(create_app(runtime), host=host, port=port, log_level=runtime.config.log_level.lower())


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Ingest grant listings from all registered sources")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--once", action="store_true", help="Run every source once and exit")
    mode.add_argument("--source", help="Run a single source once and exit")
    mode.add_argument("--serve", action="store_true", help="Serve the trigger API")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args(argv)

    config = load_config()
    logging.getLogger().setLevel(config.log_level)
    runtime = build_runtime(config)

    if args.serve:
        serve(runtime, args.host, args.port)
        return 0
    if args.once:
        return asyncio.run(run_once(runtime))
    if args.source:
        return asyncio.run(run_single(runtime, args.source))

    try:
        asyncio.run(run_forever(runtime))
    except (KeyboardInterrupt, SystemExit):
        logger.info("Stopped")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
