# ==============================================================================
# 模块: user/service.py
# 功能: 用户模块的业务逻辑服务层 (Service 层)
# 架构角色: 位于 API 层和数据访问层之间, 负责用户的创建与查询。
# 设计说明:
#   - 无状态设计, 每次请求创建新实例
#   - 只做 flush, 事务由 get_session 依赖统一提交或回滚
# ==============================================================================
"""User service."""
from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import User

logger = logging.getLogger(__name__)


class UserService:
    """Service class for user operations."""

    async def create_user(self, username: str, db: AsyncSession) -> User:
        """Create a user with a freshly generated UUID.

        Args:
            username: Display name chosen by the user.
            db: Async database session.

        Returns:
            User: The new user, flushed but not committed.
        """
        user = User(id=str(uuid.uuid4()), username=username)
        db.add(user)
        await db.flush()
        logger.info(f"User created: {user.id}")
        return user

    async def get_user(self, user_id: str, db: AsyncSession) -> User | None:
        """Get a user by UUID, or ``None`` if absent."""
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()
