# =============================================================================
# ORM 基础模型模块
# =============================================================================
# 本模块定义了 GoodPlace 中所有 SQLAlchemy ORM 模型的声明式基类。
# 架构角色：
#   - 作为 User、Action 模型的根基类
#   - 被 database.py 模块用于数据库表的自动创建（Base.metadata.create_all）
# =============================================================================

"""Base model for GoodPlace."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for all ORM models.

    All SQLAlchemy models in GoodPlace must inherit from this base so they
    are registered in ``Base.metadata`` for schema creation.
    """

    pass


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 text, e.g. ``2024-05-01T12:00:00.000000+00:00``.

    行为表的 created_at 以文本形式存储，固定微秒精度保证字符串排序与时间排序一致。
    """
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")
