"""Ingestion orchestration: engine, batch coordinator, scheduler."""

from .batch import BatchCoordinator
from .engine import IngestionEngine
from .runtime import Runtime, build_runtime, build_store
from .scheduler import IngestionScheduler

__all__ = [
    "BatchCoordinator",
    "IngestionEngine",
    "IngestionScheduler",
    "Runtime",
    "build_runtime",
    "build_store",
]
