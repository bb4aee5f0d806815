"""Convenience re-exports for session factories."""

from journeydesk.db.engine import (
    get_store_async_session,
    StoreAsyncSessionLocal,
    StoreSyncSessionLocal,
    store_async_engine,
    store_sync_engine,
)

__all__ = [
    "get_store_async_session",
    "StoreAsyncSessionLocal",
    "StoreSyncSessionLocal",
    "store_async_engine",
    "store_sync_engine",
]
