"""Engines for the programme store.

The sync engine backs the services, CLI scripts and Alembic.
The async engine backs the FastAPI layer.
"""

from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import sessionmaker

from journeydesk.config import settings

# Async engine for FastAPI
store_async_engine = create_async_engine(
    settings.store_db_url_async,
    echo=False,
    pool_pre_ping=True,
    pool_size=10,
    max_overflow=20,
)

StoreAsyncSessionLocal = async_sessionmaker(
    bind=store_async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# Sync engine for services, scripts and Alembic
store_sync_engine = create_engine(
    settings.store_db_url_sync,
    echo=False,
    pool_pre_ping=True,
    pool_size=5,
    max_overflow=10,
)

StoreSyncSessionLocal = sessionmaker(
    bind=store_sync_engine,
    expire_on_commit=False,
)


async def get_store_async_session() -> AsyncSession:
    async with StoreAsyncSessionLocal() as session:
        yield session

