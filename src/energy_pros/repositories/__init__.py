"""Storage backends and the dependency that selects one."""
from __future__ import annotations

from collections.abc import Generator
from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from energy_pros.core.settings import settings
from energy_pros.db.session import SessionLocal
from energy_pros.repositories.base import Storage
from energy_pros.repositories.memory import MemoryStorage
from energy_pros.repositories.sql import SqlStorage

__all__ = ["MemoryStorage", "SqlStorage", "Storage", "StorageDep", "get_storage", "open_storage"]


@lru_cache(maxsize=1)
def get_memory_storage() -> MemoryStorage:
    """Return the process-wide in-memory store."""
    return MemoryStorage()


def open_storage() -> Storage:
    """Open a storage handle for the configured backend."""
    if settings.storage_backend == "memory":
        return get_memory_storage()
    return SqlStorage(SessionLocal())


def get_storage() -> Generator[Storage, None, None]:
    """Yield a storage handle for dependency injection.

    Anything not committed when the request fails is rolled back.
    """
    storage = open_storage()
    try:
        yield storage
    except Exception:
        storage.rollback()
        raise
    finally:
        storage.close()


StorageDep = Annotated[Storage, Depends(get_storage)]
