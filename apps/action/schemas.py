# ==============================================================================
# 模块: action/schemas.py
# 功能: 行为记录模块的 Pydantic 数据验证与序列化模型 (Schema 层)
# 架构角色: 定义 API 层的请求体和响应体结构, 负责:
#   1. 提交请求 (ActionSubmitRequest)
#   2. 分类结果 (ClassificationSchema), 即 LLM 回复归一化后的形态
#   3. 历史记录 (ActionSchema), 从 ORM 对象转换并解码 JSON 文本字段
# ==============================================================================
"""Action schemas."""
from __future__ import annotations

import json
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class SubActionSchema(BaseModel):
    action: str = ""
    severity: int = 5


class ClassificationSchema(BaseModel):
    action: str = ""
    subactions: list[SubActionSchema] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    severity: int = 5
    factor: int = 1


# --------------------------------------------------------------------------
# ActionSubmitRequest - 提交行为的请求模型
# 设计说明: 字段均为可选, 缺失时由 API 层返回 400 及对应的错误信息
# --------------------------------------------------------------------------
class ActionSubmitRequest(BaseModel):
    user_uuid: Optional[str] = Field(default=None, alias="userUuid")
    message: Optional[str] = None
    model_config = {"populate_by_name": True}


class ActionSubmitResponse(BaseModel):
    response: ClassificationSchema


# --------------------------------------------------------------------------
# ActionSchema - 行为记录的完整响应模型
# 设计说明: from_attributes=True 允许直接从 ORM 对象转换,
#           subactions / keywords 在入库时是 JSON 文本, 这里解码为列表
# --------------------------------------------------------------------------
class ActionSchema(BaseModel):
    id: str
    action: str = ""
    subactions: list[SubActionSchema] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    severity: int
    factor: int
    user_id: str
    created_at: str
    model_config = {"from_attributes": True}

    @field_validator("subactions", "keywords", mode="before")
    @classmethod
    def decode_json_text(cls, v):
        if isinstance(v, str):
            return json.loads(v) if v else []
        return v
