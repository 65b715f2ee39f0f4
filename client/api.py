# =============================================================================
# 模块: client/api.py
# 功能: GoodPlace 后端的同步 HTTP 客户端
# 架构角色: 客户端 SDK 层。封装 HTTP 请求细节，向前端逻辑提供
#           create_user / get_user / send_action 三个调用。
# 设计决策:
#   1. 使用 httpx.Client，与服务端调用 LLM 使用同一个 HTTP 库
#   2. 支持上下文管理器模式（with 语句）
#   3. 非 2xx 响应直接抛出 httpx.HTTPStatusError，由调用方决定如何处理
# =============================================================================
"""GoodPlace backend client."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from settings import settings


class GoodPlaceClient:
    """同步客户端

    Attributes:
        base_url: 服务地址
        timeout: 请求超时时间（秒）
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """初始化客户端

        Args:
            base_url: 服务地址，默认取 settings.client_api_url
            timeout: 请求超时时间（秒），LLM 分类可能较慢
            transport: 自定义 httpx transport（测试用）
        """
        self.base_url = (base_url or settings.client_api_url).rstrip("/")
        self.timeout = timeout
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    def health_check(self) -> Dict[str, Any]:
        response = self._client.get("/health", timeout=10.0)
        response.raise_for_status()
        return response.json()

    def create_user(self, username: str) -> str:
        """创建用户

        Returns:
            新用户的 UUID
        """
        response = self._client.post("/user", json={"username": username})
        response.raise_for_status()
        return response.json()["userUuid"]

    def get_user(self, user_uuid: str) -> Dict[str, Any]:
        """获取用户及最近的行为记录（actions.results，按时间倒序）"""
        response = self._client.get(f"/user/{user_uuid}")
        response.raise_for_status()
        return response.json()

    def send_action(self, user_uuid: str, message: str) -> Dict[str, Any]:
        """提交行为

        Returns:
            分类结果：action, subactions, keywords, severity, factor
        """
        response = self._client.post(
            "/",
            json={"userUuid": user_uuid, "message": message},
        )
        response.raise_for_status()
        return response.json()["response"]

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GoodPlaceClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
