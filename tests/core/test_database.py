"""Tests for core/database.py and core/models/base.py."""

from __future__ import annotations

from datetime import datetime

import pytest
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from core import database
from core.models.base import utc_now_iso
from tests.conftest import TEST_DATABASE_URL


@pytest.fixture
def memory_engine(monkeypatch):
    """Swap the module-level engine for an in-memory one."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    monkeypatch.setattr(database, "_engine", engine)
    monkeypatch.setattr(database, "_session_factory", None)
    return engine


class TestUtcNowIso:

    def test_parses_back_with_timezone(self):
        value = utc_now_iso()
        parsed = datetime.fromisoformat(value)
        assert parsed.utcoffset().total_seconds() == 0

    def test_fixed_microsecond_precision(self):
        # 固定长度保证字符串排序与时间排序一致
        assert len(utc_now_iso()) == len("2024-05-01T12:00:00.000000+00:00")


class TestDatabaseLifecycle:

    async def test_check_connection_ok(self, memory_engine):
        assert await database.check_db_connection() is True

    async def test_check_connection_failure_returns_false(self, monkeypatch):
        def broken_engine():
            raise RuntimeError("no database")

        monkeypatch.setattr(database, "get_engine", broken_engine)
        assert await database.check_db_connection() is False

    async def test_init_db_creates_tables(self, memory_engine):
        await database.init_db()
        async with memory_engine.connect() as conn:
            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        assert {"users", "actions"} <= set(tables)
        await database.close_db()
        assert database._engine is None

    async def test_get_session_rolls_back_on_error(self, memory_engine):
        from apps.user.models import User

        await database.init_db()
        gen = database.get_session()
        session = await gen.__anext__()
        session.add(User(id="u-1", username="alice"))
        await session.flush()
        with pytest.raises(RuntimeError):
            await gen.athrow(RuntimeError("boom"))

        gen = database.get_session()
        session = await gen.__anext__()
        assert await session.get(User, "u-1") is None
        await gen.aclose()
        await database.close_db()
