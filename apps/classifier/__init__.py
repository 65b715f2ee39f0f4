"""Classifier module: LLM classification of free-text actions."""

from .providers.base import SYSTEM_PROMPT, BaseClassifierProvider
from .service import ClassifierService, close_classifier, get_classifier

__all__ = [
    "SYSTEM_PROMPT",
    "BaseClassifierProvider",
    "ClassifierService",
    "close_classifier",
    "get_classifier",
]
