# =============================================================================
# 模块: client/layers.py
# 功能: 有界的动画图层栈
# 架构角色: 前端展示层的数据模型。每条行为对应一个 Layer，
#   最新的在最前，最多保留 20 个，越旧越小越淡。
# 设计说明:
#   - 新图层以 opacity 0 / scale 5 的入场状态插入最前，
#     过渡到最终状态的动作排到下一帧（next_frame）执行
#   - 超出容量时先淘汰最旧的一个，再对所有图层按名次重算缩放和透明度
#   - 名次 i 的缩放与透明度均为 1 - 0.05 * i
# =============================================================================
"""Bounded, decaying stack of display layers."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

from client.state import ScoredAction

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 20
DEFAULT_FALLOFF = 0.05
# 图层中心点随机落在该百分比区间内（top 与 left 各自独立）
DEFAULT_BAND = (20.0, 70.0)
ENTER_OPACITY = 0.0
ENTER_SCALE = 5.0


@dataclass
class Layer:
    """One rendered action."""

    action: ScoredAction
    top: float
    left: float
    z_index: int
    opacity: float = ENTER_OPACITY
    scale: float = ENTER_SCALE
    entering: bool = True

    @property
    def positive(self) -> bool:
        return self.action.points > 0

    @property
    def css_class(self) -> str:
        return "positive" if self.positive else "negative"

    @property
    def label(self) -> str:
        sign = "+" if self.positive else ""
        return f"{self.action.action}: {sign}{self.action.points}"


class LayerStack:
    """Fixed-capacity display stack, newest first."""

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        falloff: float = DEFAULT_FALLOFF,
        band: Tuple[float, float] = DEFAULT_BAND,
        rng: Optional[random.Random] = None,
    ):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self.falloff = falloff
        self.band = band
        self._rng = rng or random.Random()
        self._layers: List[Layer] = []
        self._pending: List[Callable[[], None]] = []
        self._sequence = 0

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self) -> Iterator[Layer]:
        return iter(list(self._layers))

    @property
    def layers(self) -> Tuple[Layer, ...]:
        return tuple(self._layers)

    @property
    def pending_frames(self) -> int:
        return len(self._pending)

    def random_position(self) -> Tuple[float, float]:
        """Pick ``(top, left)`` percentages uniformly within the band."""
        low, high = self.band
        top = self._rng.random() * (high - low) + low
        left = self._rng.random() * (high - low) + low
        return top, left

    def next_sequence(self) -> int:
        """Next value of the stack-wide counter; never reset by ``clear``."""
        self._sequence += 1
        return self._sequence

    def add_layer(self, action: ScoredAction) -> Layer:
        """Insert a layer for ``action`` at the front of the stack.

        Returns:
            Layer: The inserted layer (still marked ``entering`` until the
            next frame).
        """
        top, left = self.random_position()
        layer = Layer(action=action, top=top, left=left, z_index=self.next_sequence())
        self._layers.insert(0, layer)

        self._pending.append(lambda: self._settle(layer))

        if len(self._layers) > self.capacity:
            evicted = self._layers.pop()
            logger.debug(f"Evicted layer {evicted.label!r}")

        self.recalculate_scale_and_opacity()
        return layer

    def next_frame(self) -> int:
        """Run the transitions scheduled since the last frame.

        Returns:
            int: Number of transitions applied.
        """
        pending, self._pending = self._pending, []
        for callback in pending:
            callback()
        if pending:
            self.recalculate_scale_and_opacity()
        return len(pending)

    def recalculate_scale_and_opacity(self) -> None:
        for rank, layer in enumerate(self._layers):
            value = 1 - rank * self.falloff
            layer.scale = value
            layer.opacity = value

    def clear(self) -> None:
        self._layers.clear()
        self._pending.clear()

    def _settle(self, layer: Layer) -> None:
        layer.entering = False
