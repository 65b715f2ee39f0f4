"""ORM base for GoodPlace models."""

from core.models.base import Base, utc_now_iso

__all__ = ["Base", "utc_now_iso"]
