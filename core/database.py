# =============================================================================
# 数据库连接与会话管理模块
# =============================================================================
# 本模块负责 GoodPlace 的数据库连接管理，是后端的数据访问基础层。
# 主要职责：
#   1. 创建和管理 SQLAlchemy 异步数据库引擎（AsyncEngine）
#   2. 提供异步会话工厂（async_sessionmaker）
#   3. 提供请求级数据库会话（含自动提交和回滚）
#   4. 提供数据库初始化（建表）、关闭和健康检查功能
#
# 架构设计说明：
#   - 使用模块级全局变量（_engine、_session_factory）实现单例，
#     整个应用共享同一连接池。
#   - 延迟导入 settings 模块，避免循环依赖问题。
#   - get_session() 作为 FastAPI 的 Depends 依赖注入函数使用。
# =============================================================================

"""Database connection and session management for GoodPlace."""

from __future__ import annotations

import logging
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.models.base import Base

logger = logging.getLogger(__name__)

# 模块级全局变量：数据库引擎实例，首次调用 get_engine() 时惰性创建
_engine: AsyncEngine | None = None

# 模块级全局变量：异步会话工厂实例
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Get or create the async database engine.

    Lazily constructs a singleton ``AsyncEngine`` from ``settings``. SQLite
    gets no pool sizing options and its data directory is created on demand.

    Returns:
        AsyncEngine: A shared asynchronous engine bound to ``settings.database_url``.
    """
    global _engine
    if _engine is None:
        from settings import settings

        if settings.is_sqlite:
            # SQLite 文件所在目录必须存在，否则驱动无法创建数据库文件
            settings.data_dir.mkdir(parents=True, exist_ok=True)
            _engine = create_async_engine(
                settings.database_url,
                echo=settings.db_echo,
            )
        else:
            # pool_recycle: 防止 MySQL 的 wait_timeout 导致连接断开
            _engine = create_async_engine(
                settings.database_url,
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_recycle=settings.db_pool_recycle,
                echo=settings.db_echo,
            )
        logger.info("Database engine created")
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the async session factory.

    ``expire_on_commit=False`` avoids implicit lazy-loading after ``await``
    boundaries in async handlers.
    """
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _session_factory


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session for FastAPI dependencies.

    Commits on success and rolls back on exception, so each request runs in
    its own transaction.

    Yields:
        AsyncSession: An active async SQLAlchemy session.
    """
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create all tables registered on ``Base.metadata`` if missing."""
    # 导入模型以确保表已注册到 Base.metadata
    import apps.user.models  # noqa: F401
    import apps.action.models  # noqa: F401

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created/verified")


async def close_db() -> None:
    """Dispose the database engine and clear session factory."""
    global _engine, _session_factory
    if _engine:
        await _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("Database connections closed")


async def check_db_connection() -> bool:
    """Check whether the database connection is healthy.

    Executes a lightweight ``SELECT 1`` query using a fresh connection.

    Returns:
        bool: ``True`` if the query succeeds, otherwise ``False``.
    """
    try:
        engine = get_engine()
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        # 连接失败时记录错误日志并返回 False，由调用方决定如何处理（如 503）
        logger.error(f"Database connection check failed: {e}")
        return False
