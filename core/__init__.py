"""Core module for GoodPlace."""

from core.database import get_session, init_db, close_db

__all__ = [
    "get_session",
    "init_db",
    "close_db",
]
