"""Grant and job persistence."""

from .base import GrantStore
from .client import SupabaseStore
from .memory import InMemoryStore

__all__ = ["GrantStore", "InMemoryStore", "SupabaseStore"]
