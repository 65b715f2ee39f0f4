# ==============================================================================
# 模块: action/api.py
# 功能: 提交行为并分类的 API 端点
# 架构角色: 对外接口层(Controller层), 编排 "校验 -> 查用户 -> LLM 分类 -> 入库"
#           这一条同步链路。
# 设计说明:
#   - 用户不存在时直接返回 404, 不调用 LLM 也不写库
#   - 任一下游失败 (LLM、JSON 解析、入库) 都返回 500, 不重试不补偿
# ==============================================================================
"""Action submission API endpoint."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from apps.classifier import BaseClassifierProvider, ClassifierService, get_classifier
from apps.user.service import UserService
from core.database import get_session
from .schemas import ActionSubmitRequest, ActionSubmitResponse, ClassificationSchema
from .service import ActionService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Actions"])


# --------------------------------------------------------------------------
# POST / - 提交一条行为
# 请求: {"userUuid": "...", "message": "..."}
# 返回: {"response": {action, subactions, keywords, severity, factor}}
# 错误: 字段缺失 -> 400; 用户不存在 -> 404; LLM 或入库失败 -> 500
# --------------------------------------------------------------------------
@router.post("/", response_model=ActionSubmitResponse)
async def submit_action(
    request: ActionSubmitRequest,
    db: AsyncSession = Depends(get_session),
    provider: BaseClassifierProvider = Depends(get_classifier),
):
    if not request.user_uuid:
        raise HTTPException(status_code=400, detail="User UUID is required")
    if not request.message:
        raise HTTPException(status_code=400, detail="Message is required")

    try:
        user = await UserService().get_user(request.user_uuid, db)
    except SQLAlchemyError:
        logger.exception(f"Failed to load user {request.user_uuid}")
        raise HTTPException(status_code=500, detail="An error occurred")
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")

    result = await ClassifierService(provider).classify(request.message)
    if not result.get("success"):
        logger.error(f"Classification failed for user {user.id}: {result.get('error_message')}")
        raise HTTPException(
            status_code=500,
            detail="An error occurred while communicating with OpenAI",
        )

    try:
        await ActionService().create_action(user.id, result, db)
    except SQLAlchemyError:
        logger.exception(f"Failed to store action for user {user.id}")
        raise HTTPException(
            status_code=500,
            detail="An error occurred while saving the action",
        )

    return ActionSubmitResponse(response=ClassificationSchema.model_validate(result))
