"""Common utilities for GoodPlace."""

from common.logger import setup_logging

__all__ = [
    "setup_logging",
]
