# ==============================================================================
# 模块: action/models.py
# 功能: 行为记录模块的数据库模型定义 (ORM 映射层)
# 架构角色: 定义 actions 表, 存储 LLM 对用户提交行为的分类结果。
# 设计说明:
#   - subactions / keywords 以 JSON 文本存储, 读取时由 Schema 层解码
#   - created_at 以 ISO-8601 文本存储, 固定精度保证字符串排序即时间排序
#   - 只追加, 不更新不删除
# ==============================================================================
"""Action models."""
from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from core.models.base import Base, utc_now_iso


# --------------------------------------------------------------------------
# Action 模型 - 行为记录表
# 关键字段:
#   - action: LLM 给出的行为摘要
#   - subactions: [{"action": str, "severity": int}] 的 JSON 文本
#   - keywords: 关键词列表的 JSON 文本
#   - severity: 0-10, 0 = 正面, 5 = 中性, 10 = 非常严重
#   - factor: 1-1000, 影响规模
# 索引设计:
#   - (user_id, created_at) 复合索引: 优化 "某用户最近 N 条" 查询
# --------------------------------------------------------------------------
class Action(Base):
    """A classified action submitted by a user."""

    __tablename__ = "actions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    action: Mapped[str] = mapped_column(Text, nullable=False, default="")
    subactions: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    keywords: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    severity: Mapped[int] = mapped_column(Integer, nullable=False)
    factor: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[str] = mapped_column(
        String(40), nullable=False, default=utc_now_iso
    )

    __table_args__ = (Index("ix_actions_user_created", "user_id", "created_at"),)
