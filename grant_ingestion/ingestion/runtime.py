"""Builds the process-lifetime object graph from configuration."""

import logging
from dataclasses import dataclass
from typing import Optional

from ..adapters.base import FetchSettings
from ..adapters.strategy import RSSFirstStrategy
from ..config import Config, load_config
from ..database import GrantStore, InMemoryStore, SupabaseStore
from ..sources.registry import SourceRegistry, default_registry
from .batch import BatchCoordinator
from .engine import IngestionEngine
from .scheduler import IngestionScheduler

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    config: Config
    store: GrantStore
    registry: SourceRegistry
    engine: IngestionEngine
    coordinator: BatchCoordinator
    scheduler: IngestionScheduler


def build_store(config: Config) -> GrantStore:
    if config.use_supabase:
        logger.info("Using Supabase store")
        return SupabaseStore(config.supabase_url, config.supabase_key)
    logger.warning("SUPABASE_URL/SUPABASE_KEY not set; using in-memory store")
    return InMemoryStore()


def build_runtime(
    config: Optional[Config] = None,
    store: Optional[GrantStore] = None,
    registry: Optional[SourceRegistry] = None,
) -> Runtime:
    """Wire store, registry, engine, coordinator and scheduler once."""
    config = config or load_config()
    store = store or build_store(config)
    registry = registry or default_registry()

    strategy = RSSFirstStrategy(FetchSettings.from_config(config))
    engine = IngestionEngine(store, registry, strategy)
    coordinator = BatchCoordinator(
        engine,
        registry,
        max_concurrency=config.max_concurrent_sources,
        inject_sample_grants=config.inject_sample_grants,
    )
    scheduler = IngestionScheduler(engine, coordinator, interval_hours=config.scrape_interval_hours)
    return Runtime(
        config=config,
        store=store,
        registry=registry,
        engine=engine,
        coordinator=coordinator,
        scheduler=scheduler,
    )
