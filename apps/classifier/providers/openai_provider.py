# =============================================================================
# OpenAI 分类器 Provider 模块
# =============================================================================
# 本模块实现了基于 OpenAI Chat Completions API 的行为分类。
# 设计决策：
#   - 使用 httpx 而非 openai 官方 SDK，保持依赖轻量
#   - 默认使用 gpt-4o-mini 模型
#   - 支持自定义 base_url，可接入代理或其他兼容 API
#   - 重试次数由 ai_max_retries 控制，默认 1 次即不重试
# =============================================================================

"""OpenAI classifier provider."""

from __future__ import annotations

import logging
import time

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from settings import settings
from .base import BaseClassifierProvider, parse_json_response

logger = logging.getLogger(__name__)


class OpenAIProvider(BaseClassifierProvider):
    """OpenAI API provider.

    基于 OpenAI Chat Completions 的行为分类提供商。
    """

    name = "openai"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: int | None = None,
        max_retries: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key.
            model: Model name override.
            base_url: API base URL (supports custom proxies or compatible APIs).
            timeout: Request timeout in seconds.
            max_retries: Total attempts per call (1 = no retry).
            transport: Optional httpx transport, used by tests.
        """
        self._api_key = api_key if api_key is not None else settings.openai_api_key
        self._model = model or settings.openai_model or "gpt-4o-mini"
        self._base_url = (base_url or settings.openai_base_url or "https://api.openai.com/v1").rstrip("/")
        self._timeout = timeout or settings.openai_timeout or 60
        self._max_retries = max(1, max_retries or settings.ai_max_retries)
        self._transport = transport
        # 持久化 HTTP 客户端，复用 TCP 连接
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the persistent HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the persistent HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def is_available(self) -> bool:
        """OpenAI is usable when an API key is configured.

        不做实际网络请求，避免不必要的 API 调用消耗。
        """
        return bool(self._api_key)

    async def _call_api(self, headers: dict, payload: dict) -> dict:
        """POST one Chat Completions request and return the response JSON."""
        client = self._get_client()
        response = await client.post(
            f"{self._base_url}/chat/completions",
            headers=headers,
            json=payload,
        )
        response.raise_for_status()
        return response.json()

    async def classify(self, message: str) -> dict:
        """Classify an action using OpenAI Chat Completions.

        Args:
            message: The user's free-text action.

        Returns:
            dict: Normalized classification with ``success=True``, or
            ``success=False`` with ``error_message`` on any failure.
        """
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self._model,
            "messages": self.build_messages(message),
        }

        start_time = time.time()
        try:
            retrying_call = retry(
                stop=stop_after_attempt(self._max_retries),
                wait=wait_exponential(multiplier=settings.ai_retry_base_delay, max=10),
                retry=retry_if_exception_type((httpx.RequestError, httpx.HTTPStatusError)),
                reraise=True,
            )(self._call_api)
            result = await retrying_call(headers, payload)

            choices = result.get("choices") or []
            response_text = (choices[0].get("message") or {}).get("content") if choices else None
            if not response_text:
                logger.error(f"Empty completion from OpenAI: {result}")
                return self._failure("Empty response from LLM")

            data = parse_json_response(response_text)
            extracted = self.extract_result(data)
            extracted["provider"] = self.name
            extracted["model"] = self._model
            extracted["duration_ms"] = int((time.time() - start_time) * 1000)
            extracted["success"] = True
            return extracted

        except Exception as e:
            # 网络、限流、余额不足、JSON 解析失败等统一转换为失败结果
            logger.error(f"OpenAI classification failed: {e}")
            return self._failure(str(e))

    def _failure(self, error_message: str) -> dict:
        return {
            "provider": self.name,
            "model": self._model,
            "success": False,
            "error_message": error_message,
        }
