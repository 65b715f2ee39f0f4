# ==============================================================================
# 模块: user/schemas.py
# 功能: 用户模块的 Pydantic 数据验证与序列化模型 (Schema 层)
# 架构角色: 定义 /user 路由的请求体和响应体结构
# 设计说明:
#   - 对外字段名沿用前端约定的 camelCase（userUuid），内部使用 snake_case
#   - username 声明为可选，缺失时由 API 层返回 400 而不是 422
# ==============================================================================
"""User schemas."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from apps.action.schemas import ActionSchema


class UserCreateRequest(BaseModel):
    username: Optional[str] = None


class UserCreateResponse(BaseModel):
    user_uuid: str = Field(alias="userUuid")
    model_config = {"populate_by_name": True}


# --------------------------------------------------------------------------
# ActionResults - 行为列表的包装对象
# 设计说明: 前端读取 user.actions.results，保持这一层嵌套
# --------------------------------------------------------------------------
class ActionResults(BaseModel):
    results: list[ActionSchema] = Field(default_factory=list)


class UserDetailResponse(BaseModel):
    id: str
    username: str
    actions: ActionResults = Field(default_factory=ActionResults)
