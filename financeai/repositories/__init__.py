"""
Persistence adapters.

Services depend on the ``Repository`` interface; ``build_repository`` is the
single place where the configured backend (memory or SQL) is chosen.
"""

from __future__ import annotations

from financeai.core.config import Settings

from .base import DuplicateRecordError, Repository, RepositoryError
from .memory_repository import MemoryRepository
from .sql_repository import SQLRepository

__all__ = [
    "DuplicateRecordError",
    "MemoryRepository",
    "Repository",
    "RepositoryError",
    "SQLRepository",
    "build_repository",
]


def build_repository(settings: Settings) -> Repository:
    backend = settings.storage_backend
    if backend == "memory":
        return MemoryRepository(enforce_unique=settings.enforce_unique, seed_admin=settings.seed_admin)
    if backend in {"sql", "postgres", "database"}:
        from financeai.db.session import build_engine, build_sessionmaker

        return SQLRepository(build_sessionmaker(build_engine(settings.database_url)))
    raise ValueError(f"Unknown STORAGE_BACKEND: {backend!r}")
