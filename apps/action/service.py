# ==============================================================================
# 模块: action/service.py
# 功能: 行为记录模块的业务逻辑服务层 (Service 层)
# 架构角色: 位于 API 层和数据访问层之间, 负责分类结果的持久化与历史查询。
# 设计说明:
#   - LLM 调用不在本服务内, 由 API 层先调用分类器再交给本服务入库,
#     两者之间没有跨越的事务: 入库失败时 LLM 的花费已经发生
#   - 只做 flush, 事务由 get_session 依赖统一提交或回滚
# ==============================================================================
"""Action service."""
from __future__ import annotations

import json
import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.models.base import utc_now_iso
from .models import Action

logger = logging.getLogger(__name__)


class ActionService:
    """Service class for action persistence and history."""

    async def create_action(
        self, user_id: str, classification: dict, db: AsyncSession
    ) -> Action:
        """Persist a normalized classification for a user.

        Args:
            user_id: Owner user UUID.
            classification: Normalized classifier result.
            db: Async database session.

        Returns:
            Action: The new row, flushed but not committed.
        """
        action = Action(
            id=str(uuid.uuid4()),
            action=classification["action"],
            subactions=json.dumps(classification["subactions"], ensure_ascii=False),
            keywords=json.dumps(classification["keywords"], ensure_ascii=False),
            severity=classification["severity"],
            factor=classification["factor"],
            user_id=user_id,
            created_at=utc_now_iso(),
        )
        db.add(action)
        await db.flush()
        logger.info(f"Action {action.id} stored for user {user_id}")
        return action

    async def list_recent_actions(
        self, user_id: str, db: AsyncSession, limit: int = 20
    ) -> list[Action]:
        """List the most recent actions of a user, newest first."""
        result = await db.execute(
            select(Action)
            .where(Action.user_id == user_id)
            .order_by(Action.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
