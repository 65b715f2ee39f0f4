# ==============================================================================
# 模块: user/api.py
# 功能: 用户模块的 RESTful API 端点定义
# 架构角色: 对外接口层(Controller层), 提供用户创建与用户详情查询。
# 设计说明: 没有认证, 用户 UUID 本身就是客户端持有的凭据。
#           用户详情会附带最近的行为记录, 前端启动时一次性恢复历史。
# ==============================================================================
"""User API endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from apps.action.schemas import ActionSchema
from apps.action.service import ActionService
from core.database import get_session
from settings import settings
from .schemas import (
    ActionResults,
    UserCreateRequest,
    UserCreateResponse,
    UserDetailResponse,
)
from .service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"])


# --------------------------------------------------------------------------
# POST /user - 创建用户
# 返回: {"userUuid": "..."}
# 错误: username 缺失 -> 400; 存储失败 -> 500
# --------------------------------------------------------------------------
@router.post("", response_model=UserCreateResponse)
async def create_user(
    request: UserCreateRequest,
    db: AsyncSession = Depends(get_session),
):
    if not request.username or not request.username.strip():
        raise HTTPException(status_code=400, detail="Username is required")
    service = UserService()
    try:
        user = await service.create_user(request.username.strip(), db)
    except SQLAlchemyError:
        logger.exception("Failed to create user")
        raise HTTPException(status_code=500, detail="An error occurred")
    return UserCreateResponse(user_uuid=user.id)


# --------------------------------------------------------------------------
# GET /user/{user_id} - 获取用户及其最近的行为记录
# 返回: 用户信息 + actions.results (按创建时间倒序, 最多 history_limit 条)
# 错误: 用户不存在 -> 404; 查询失败 -> 500
# --------------------------------------------------------------------------
@router.get("/{user_id}", response_model=UserDetailResponse)
async def get_user(
    user_id: str,
    db: AsyncSession = Depends(get_session),
):
    try:
        user = await UserService().get_user(user_id, db)
        if user is None:
            raise HTTPException(status_code=404, detail="User not found")
        actions = await ActionService().list_recent_actions(
            user.id, db, limit=settings.history_limit
        )
    except SQLAlchemyError:
        logger.exception(f"Failed to load user {user_id}")
        raise HTTPException(status_code=500, detail="An error occurred")
    return UserDetailResponse(
        id=user.id,
        username=user.username,
        actions=ActionResults(
            results=[ActionSchema.model_validate(a) for a in actions]
        ),
    )
