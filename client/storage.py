# =============================================================================
# 模块: client/storage.py
# 功能: 客户端本地持久化
# 架构角色: 只保存一个键 userUuid，启动时读取，重置或用户失效时清除。
# =============================================================================
"""Local persistence of the user identifier."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

STORAGE_KEY = "userUuid"


class UserStore:
    """A single persisted ``userUuid`` key in a small JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def load(self) -> Optional[str]:
        """Return the stored identifier, or ``None``.

        An unreadable file is treated as empty and logged.
        """
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring corrupt storage file {self.path}: {e}")
            return None
        value = data.get(STORAGE_KEY) if isinstance(data, dict) else None
        return value or None

    def save(self, user_uuid: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({STORAGE_KEY: user_uuid}), encoding="utf-8")

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
