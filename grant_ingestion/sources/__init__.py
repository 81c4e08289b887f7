"""Source registry and verification data."""

from .registry import DEFAULT_SOURCES, SourceConfig, SourceRegistry, default_registry
from .sample_data import generate_sample_grants

__all__ = [
    "DEFAULT_SOURCES",
    "SourceConfig",
    "SourceRegistry",
    "default_registry",
    "generate_sample_grants",
]
