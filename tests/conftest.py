"""Shared test fixtures for draftpress."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

import draftpress.models  # noqa: F401  (registers tables on Base.metadata)
from draftpress.db.base import Base
from draftpress.db.engine import build_session_factory
from draftpress.schemas.project import CallerIdentity, ProjectCreate
from draftpress.services import project_service


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """A fresh SQLite database per test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'draftpress.db'}")

    # The sqlite driver's own transaction handling breaks SAVEPOINT; let
    # SQLAlchemy emit BEGIN instead.
    @event.listens_for(engine.sync_engine, "connect")
    def _connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_factory(engine)


@pytest.fixture
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def caller() -> CallerIdentity:
    return CallerIdentity(user_id="user-1", email="baker@example.com", name="Baker")


@pytest.fixture
async def bakery(db: AsyncSession, caller: CallerIdentity):
    """A freshly created project with slug ``my-bakery``."""
    return await project_service.create_project(
        db, caller.user_id, ProjectCreate(name="My Bakery", slug="my-bakery")
    )
