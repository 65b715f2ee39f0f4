# ==============================================================================
# 模块: user/models.py
# 功能: 用户模块的数据库模型定义 (ORM 映射层)
# 架构角色: 定义 users 表。用户没有密码和会话，客户端只持有一个不透明的 UUID。
# 设计说明:
#   - 主键为 UUID4 字符串，由服务端在创建时生成
#   - 用户创建后不可修改，系统本身不会删除用户
# ==============================================================================
"""User models."""
from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from core.models.base import Base


class User(Base):
    """A person recording actions, identified by an opaque UUID."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    username: Mapped[str] = mapped_column(Text, nullable=False)
