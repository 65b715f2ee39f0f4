# =============================================================================
# 模块: client/state.py
# 功能: 客户端的显式状态对象
# 架构角色: 当前用户 UUID、已得分的行为列表、输入框是否可用等，
#   都放在 ClientState 中并显式传给前端逻辑，不使用模块级全局变量。
# =============================================================================
"""Client-side state."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from client.scoring import calculate_points


@dataclass
class ScoredAction:
    """One classified action together with its display points."""

    id: Union[int, str]
    action: str
    severity: int
    factor: int
    points: int

    @classmethod
    def from_classification(
        cls,
        action_id: Union[int, str],
        data: Dict[str, Any],
        rng: Optional[random.Random] = None,
    ) -> "ScoredAction":
        """Build from a classification or a stored action row.

        Points are drawn fresh each time; they are never stored server-side.
        """
        severity = int(data["severity"])
        factor = int(data["factor"])
        return cls(
            id=action_id,
            action=data.get("action", ""),
            severity=severity,
            factor=factor,
            points=calculate_points(severity, factor, rng),
        )


@dataclass
class ClientState:
    """Everything the front end knows about the current session.

    Attributes:
        user_uuid: Identifier returned by ``POST /user``; ``None`` before signup.
        actions: Scored actions, newest first.
        input_enabled: False while a request is in flight.
        welcome_visible: True until a user exists.
    """

    user_uuid: Optional[str] = None
    actions: List[ScoredAction] = field(default_factory=list)
    input_enabled: bool = True
    welcome_visible: bool = True

    @property
    def prompt(self) -> str:
        return "Type your username" if self.user_uuid is None else "Type your sin"

    def require_user(self) -> str:
        """Return the user UUID or raise if there is none yet."""
        if not self.user_uuid:
            raise RuntimeError("User UUID is missing")
        return self.user_uuid

    def clear(self) -> None:
        self.user_uuid = None
        self.actions.clear()
        self.input_enabled = True
        self.welcome_visible = True
