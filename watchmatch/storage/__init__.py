"""Storage backends.

Usage:
    ```python
    from watchmatch.storage import create_storage

    storage = create_storage()          # backend from settings
    storage = create_storage("sql", database_url="sqlite://")
    storage.init()
    ```
"""

from typing import Optional

from watchmatch.core.config import settings
from watchmatch.core.db import make_engine

from .base import Storage
from .memory import MemoryStorage
from .sql import SQLStorage


def create_storage(backend: Optional[str] = None, database_url: Optional[str] = None) -> Storage:
    backend = backend or settings.STORAGE_BACKEND
    if backend == "memory":
        return MemoryStorage()
    if backend == "sql":
        return SQLStorage(make_engine(database_url))
    raise ValueError(f"Unknown storage backend: {backend}")


__all__ = ["MemoryStorage", "SQLStorage", "Storage", "create_storage"]
