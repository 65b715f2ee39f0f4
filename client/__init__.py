# =============================================================================
# 模块: client/__init__.py
# 功能: GoodPlace 客户端包初始化
# =============================================================================
"""GoodPlace client.

Usage:
    from client import GoodPlaceClient, GoodPlaceApp, UserStore

    with GoodPlaceClient("http://localhost:8000") as api:
        app = GoodPlaceApp(api, UserStore("~/.goodplace/storage.json"))
        app.startup()
        app.submit("alice")
        app.submit("Eating a hamburger")
"""

from .api import GoodPlaceClient
from .app import GoodPlaceApp
from .layers import Layer, LayerStack
from .scoring import calculate_points
from .state import ClientState, ScoredAction
from .storage import UserStore

__all__ = [
    "GoodPlaceClient",
    "GoodPlaceApp",
    "Layer",
    "LayerStack",
    "calculate_points",
    "ClientState",
    "ScoredAction",
    "UserStore",
]
