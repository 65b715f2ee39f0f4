# =============================================================================
# 模块: client/scoring.py
# 功能: 将 LLM 给出的 severity / factor 换算为展示用的得分
# 架构角色: 客户端纯函数，不依赖网络与状态。
# 设计说明:
#   - severity <= 6 时得分为 (5 - severity) * factor * r，
#     因此 severity 5 为 0，severity 6 为小幅负分
#   - severity > 6 时得分为 -severity * factor * r，负分幅度明显跳变
#   - r 在 [0.9, 1.1) 内均匀分布，结果向负无穷取整
# =============================================================================
"""Points calculation for classified actions."""

from __future__ import annotations

import math
import random
from typing import Optional

# 随机扰动区间 [RANDOM_MIN, RANDOM_MIN + RANDOM_SPAN)
RANDOM_MIN = 0.9
RANDOM_SPAN = 0.2

# 超过该严重度后使用 -severity 分支
NEGATIVE_THRESHOLD = 6


def random_multiplier(rng: Optional[random.Random] = None) -> float:
    """Draw the per-call multiplier uniformly from [0.9, 1.1)."""
    return (rng or random).random() * RANDOM_SPAN + RANDOM_MIN


def points_for(severity: int, factor: int, multiplier: float) -> int:
    """Deterministic part of the score for a given multiplier."""
    if severity <= NEGATIVE_THRESHOLD:
        return math.floor((5 - severity) * factor * multiplier)
    return math.floor(-severity * factor * multiplier)


def calculate_points(
    severity: int, factor: int, rng: Optional[random.Random] = None
) -> int:
    """Turn an action's severity and factor into signed points.

    Args:
        severity: LLM severity, 0 (positive) to 10 (very serious).
        factor: LLM impact factor, 1 to 1000.
        rng: Optional random generator; defaults to the ``random`` module.

    Returns:
        int: Positive for severity < 5, zero for 5, negative above.
    """
    return points_for(severity, factor, random_multiplier(rng))
