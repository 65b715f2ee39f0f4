# =============================================================================
# 分类器服务层模块
# =============================================================================
# 本模块承上启下：
#   - 上层：被提交行为的 API 端点调用
#   - 下层：调用具体的 LLM Provider
# 核心职责：
#   1. 根据配置选择 Provider（工厂函数）
#   2. 维护进程级 Provider 单例，复用 HTTP 连接池
#   3. 调用前检查 Provider 可用性，统一记录日志
# =============================================================================

"""Classifier service layer."""

from __future__ import annotations

import logging

from settings import settings

from .providers.base import BaseClassifierProvider

logger = logging.getLogger(__name__)

# 进程级 Provider 单例，首次调用 get_classifier() 时创建
_provider: BaseClassifierProvider | None = None


def get_classifier_provider(provider_name: str | None = None) -> BaseClassifierProvider:
    """Get a classifier provider by name.

    Args:
        provider_name: Provider name override. Defaults to settings.classifier_provider.

    Raises:
        ValueError: If the provider name is unknown.
    """
    provider_name = provider_name or settings.classifier_provider
    if provider_name == "openai":
        from .providers.openai_provider import OpenAIProvider
        return OpenAIProvider()
    raise ValueError(f"Unknown classifier provider: {provider_name}")


def get_classifier() -> BaseClassifierProvider:
    """FastAPI dependency returning the shared provider instance."""
    global _provider
    if _provider is None:
        _provider = get_classifier_provider()
    return _provider


async def close_classifier() -> None:
    """Close the shared provider (called on application shutdown)."""
    global _provider
    if _provider is not None:
        await _provider.close()
        _provider = None


class ClassifierService:
    """Service wrapping a provider with availability checks and logging."""

    def __init__(self, provider: BaseClassifierProvider | None = None):
        self.provider = provider or get_classifier()

    async def classify(self, message: str) -> dict:
        """Classify ``message``; never raises.

        Returns:
            dict: Provider result; ``success`` tells whether it can be stored.
        """
        if not await self.provider.is_available():
            logger.error(f"Classifier provider '{self.provider.name}' is not configured")
            return {
                "provider": self.provider.name,
                "success": False,
                "error_message": "Classifier provider is not configured",
            }

        result = await self.provider.classify(message)
        if result.get("success"):
            logger.info(
                f"Classified action: severity={result['severity']} "
                f"factor={result['factor']} ({result.get('duration_ms', 0)}ms)"
            )
        return result
