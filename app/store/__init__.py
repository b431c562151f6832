"""Store selection and the ``get_store`` dependency."""

from collections.abc import Generator

from app.config import get_settings
from app.store.base import Store, UserStore, VoiceStore
from app.store.memory import MemoryStore

_memory_store: MemoryStore | None = None


def get_memory_store() -> MemoryStore:
    """Get the process-wide in-memory store."""
    global _memory_store
    if _memory_store is None:
        _memory_store = MemoryStore()
    return _memory_store


def get_store() -> Generator[Store, None, None]:
    """Yield the configured store for one request."""
    settings = get_settings()
    if settings.STORE_BACKEND != "sql":
        yield get_memory_store()
        return

    from app.database import SessionLocal
    from app.store.sql import SqlStore

    db = SessionLocal()
    try:
        yield SqlStore(db)
    finally:
        db.close()


__all__ = ["Store", "UserStore", "VoiceStore", "MemoryStore", "get_memory_store", "get_store"]
