# =============================================================================
# 模块: client/app.py
# 功能: 前端交互逻辑
# 架构角色: 串联本地存储、HTTP 客户端、得分计算与图层栈。
# 设计说明:
#   - 同一时间只有一个请求：请求期间 input_enabled 为 False，
#     成功和失败路径都会恢复
#   - 失败只记录日志，不抛给用户也不自动重试，用户可手动再次提交
#   - 启动时恢复的历史按从旧到新依次入栈，保证最新的一条在最前
# =============================================================================
"""Front-end logic for GoodPlace."""

from __future__ import annotations

import logging
import random
import time
from typing import Callable, Optional

import httpx

from client.api import GoodPlaceClient
from client.layers import LayerStack
from client.state import ClientState, ScoredAction
from client.storage import UserStore

logger = logging.getLogger(__name__)

# 恢复历史时两个图层之间的间隔（秒）
REPLAY_DELAY = 0.25


class GoodPlaceApp:
    """Client session: signup, history replay and action submission."""

    def __init__(
        self,
        api: GoodPlaceClient,
        store: UserStore,
        state: Optional[ClientState] = None,
        layers: Optional[LayerStack] = None,
        rng: Optional[random.Random] = None,
        replay_delay: float = REPLAY_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.api = api
        self.store = store
        self.state = state if state is not None else ClientState()
        self.layers = layers if layers is not None else LayerStack(rng=rng)
        self.rng = rng
        self.replay_delay = replay_delay
        self._sleep = sleep

    def startup(self) -> bool:
        """Restore the stored user and replay their recent actions.

        Returns:
            bool: True if a user was restored.
        """
        user_uuid = self.store.load()
        if not user_uuid:
            return False

        try:
            user = self.api.get_user(user_uuid)
            results = user["actions"]["results"]
            restored = [
                ScoredAction.from_classification(row.get("id", index + 1), row, self.rng)
                for index, row in enumerate(results)
            ]
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Could not restore user {user_uuid}: {e}")
            self.store.clear()
            return False

        self.state.user_uuid = user_uuid
        self.state.actions.extend(restored)
        for index, scored in enumerate(reversed(restored)):
            if index and self.replay_delay:
                self._sleep(self.replay_delay)
            self.layers.add_layer(scored)
            self.layers.next_frame()
        self.state.welcome_visible = False
        logger.info(f"Restored user {user_uuid} with {len(restored)} actions")
        return True

    def submit(self, text: str):
        """Handle one line of input: a username before signup, an action after."""
        value = text.strip()
        if not value:
            return None
        if self.state.user_uuid is None:
            return self.create_user(value)
        return self.send_action(value)

    def create_user(self, username: str) -> bool:
        self.state.input_enabled = False
        try:
            user_uuid = self.api.create_user(username)
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Error creating user: {e}")
            return False
        finally:
            self.state.input_enabled = True

        self.state.user_uuid = user_uuid
        self.store.save(user_uuid)
        self.state.welcome_visible = False
        return True

    def send_action(self, message: str) -> Optional[ScoredAction]:
        """Submit an action and push its layer.

        Raises:
            RuntimeError: If no user has been created or restored.
        """
        user_uuid = self.state.require_user()

        self.state.input_enabled = False
        try:
            response = self.api.send_action(user_uuid, message)
            scored = ScoredAction.from_classification(
                self.layers.next_sequence(), response, self.rng
            )
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Error sending action: {e}")
            return None
        finally:
            self.state.input_enabled = True

        self.state.actions.insert(0, scored)
        self.layers.add_layer(scored)
        return scored

    def reset(self) -> None:
        """Forget the stored user locally (the server keeps it)."""
        self.store.clear()
        self.state.clear()
        self.layers.clear()
