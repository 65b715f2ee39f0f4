"""Classifier providers."""

from .base import BaseClassifierProvider
from .openai_provider import OpenAIProvider

__all__ = ["BaseClassifierProvider", "OpenAIProvider"]
