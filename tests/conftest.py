"""Shared test fixtures for GoodPlace tests."""

from __future__ import annotations

import os
import sys
from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Ensure the project root is on sys.path so bare imports work
_PROJECT_ROOT = os.path.join(os.path.dirname(__file__), os.pardir)
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, os.path.abspath(_PROJECT_ROOT))

from apps.classifier.providers.base import BaseClassifierProvider  # noqa: E402

# Use in-memory SQLite for tests (faster, no external dependencies)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

HAMBURGER_REPLY = {
    "action": "eating a hamburger",
    "subactions": [
        {"action": "tastes good", "severity": 2},
        {"action": "bad for health", "severity": 6},
        {"action": "supports intensive farming", "severity": 7},
    ],
    "keywords": ["food", "health", "meat"],
    "severity": 6,
    "factor": 50,
}


class FakeProvider(BaseClassifierProvider):
    """In-process classifier that records calls instead of hitting an LLM.

    When ``echo`` is set the user's message becomes the action summary, which
    makes stored rows easy to tell apart.
    """

    name = "fake"

    def __init__(self, reply: dict | None = None, success: bool = True,
                 available: bool = True, echo: bool = False):
        self.reply = dict(reply or HAMBURGER_REPLY)
        self.success = success
        self.available = available
        self.echo = echo
        self.calls: list[str] = []

    async def is_available(self) -> bool:
        return self.available

    async def classify(self, message: str) -> dict:
        self.calls.append(message)
        if not self.success:
            return {"provider": self.name, "success": False, "error_message": "boom"}
        reply = dict(self.reply)
        if self.echo:
            reply["action"] = message
        try:
            result = self.extract_result(reply)
        except ValueError as e:
            return {"provider": self.name, "success": False, "error_message": str(e)}
        result["provider"] = self.name
        result["success"] = True
        return result


def _new_engine():
    # StaticPool: all connections share the same in-memory SQLite database
    return create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


def _register_models() -> None:
    import apps.action.models  # noqa: F401
    import apps.user.models  # noqa: F401


@pytest.fixture
def fake_provider() -> FakeProvider:
    """Provide the classifier used by the API under test."""
    return FakeProvider()


@pytest.fixture
def client(fake_provider: FakeProvider) -> Generator[TestClient, None, None]:
    """Provide a FastAPI test client with DB and classifier overrides.

    构建测试客户端并覆盖数据库与分类器依赖，不运行生命周期事件。
    """
    from fastapi import Depends, FastAPI

    from apps.action.models import Action
    from apps.classifier import get_classifier
    from core.database import get_session
    from core.models.base import Base
    from main import app

    _register_models()
    engine = _new_engine()
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    created = False

    async def override_get_session():
        nonlocal created
        if not created:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            created = True
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    test_app = FastAPI(title=app.title)

    for middleware in app.user_middleware:
        test_app.user_middleware.append(middleware)

    for exc_class, handler in app.exception_handlers.items():
        test_app.add_exception_handler(exc_class, handler)

    for route in app.routes:
        test_app.routes.append(route)

    # ----- Test-only endpoint: count stored actions -----
    @test_app.get("/_test/action-count")
    async def _test_action_count(session: AsyncSession = Depends(get_session)):
        result = await session.execute(select(func.count()).select_from(Action))
        return {"count": result.scalar() or 0}

    test_app.dependency_overrides[get_session] = override_get_session
    test_app.dependency_overrides[get_classifier] = lambda: fake_provider
    # Routes copied from ``app`` resolve overrides through the original app
    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_classifier] = lambda: fake_provider

    with TestClient(test_app, raise_server_exceptions=False) as test_client:
        yield test_client

    test_app.dependency_overrides.clear()
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an isolated database session per test."""
    from core.models.base import Base

    _register_models()
    engine = _new_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
        await session.rollback()

    await engine.dispose()


def create_user(client: TestClient, username: str = "alice") -> str:
    """Create a user through the API and return its UUID."""
    response = client.post("/user", json={"username": username})
    assert response.status_code == 200, response.text
    return response.json()["userUuid"]


def action_count(client: TestClient) -> int:
    return client.get("/_test/action-count").json()["count"]
