"""Shared fixtures — a throwaway SQLite database per test."""

import pytest_asyncio

from app.infrastructure.database import Base
from app.infrastructure.database.session import build_engine, build_session_factory


@pytest_asyncio.fixture
async def sqlite_engine(tmp_path):
    """Async engine on a fresh SQLite file with all tables created."""
    engine = build_engine(f"sqlite:///{tmp_path / 'library.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(sqlite_engine):
    return build_session_factory(sqlite_engine)
