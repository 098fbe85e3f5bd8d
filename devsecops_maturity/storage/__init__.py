"""Storage package — key-value backing stores and the project repository."""

from __future__ import annotations

from ..config import StorageConfig
from .repository import NotFoundError, ProjectRepository, STORAGE_KEYS
from .store import KeyValueStore, MemoryStore, PersistenceError, SQLiteStore


def build_store(config: StorageConfig) -> KeyValueStore:
    """Create the backing store selected by configuration."""
    if config.backend == "memory":
        return MemoryStore()
    if config.backend == "sqlite":
        return SQLiteStore(config.db_path)
    raise ValueError(f"Unknown storage backend: {config.backend}")


__all__ = [
    "build_store",
    "KeyValueStore",
    "MemoryStore",
    "NotFoundError",
    "PersistenceError",
    "ProjectRepository",
    "SQLiteStore",
    "STORAGE_KEYS",
]
