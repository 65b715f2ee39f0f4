# =============================================================================
# 模块: common/config_loader.py
# 功能: YAML 配置文件加载工具模块
# 架构角色: 作为配置基础设施层，为 settings.py 和日志系统提供 YAML 读取能力。
#   - /config/defaults.yaml: 应用默认配置（由 settings.py 读取）
#   - /config/logging.yaml: 日志配置（由 setup_logging_from_yaml 读取）
#
# 设计决策:
#   - 使用模块级变量 _config_cache 缓存主配置，避免重复读取文件
#   - 日志配置使用 Python 标准库 logging.config.dictConfig
# =============================================================================
"""YAML configuration loader for GoodPlace."""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

# 项目根目录：从 common/ 目录向上一级
BASE_DIR = Path(__file__).resolve().parents[1]
# 全局配置文件目录
CONFIG_DIR = BASE_DIR / "config"

# 模块级配置缓存，None 表示尚未加载
_config_cache: Optional[Dict[str, Any]] = None


def load_yaml(file_path: Path) -> Dict[str, Any]:
    """Load a YAML file and return its contents as a dict.

    文件不存在或为空时返回空字典。

    Args:
        file_path: Path to the YAML file.

    Returns:
        Dictionary containing the YAML contents, or empty dict if file doesn't exist.
    """
    if not file_path.exists():
        return {}
    with open(file_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_config() -> Dict[str, Any]:
    """Load and cache the main config from /config/defaults.yaml."""
    global _config_cache
    if _config_cache is None:
        _config_cache = load_yaml(CONFIG_DIR / "defaults.yaml")
    return _config_cache


def setup_logging_from_yaml(
    config_path: Optional[Path] = None,
    log_level_override: Optional[str] = None,
    log_file_override: Optional[Path] = None,
) -> None:
    """Configure logging from YAML with optional overrides.

    从 YAML 配置文件初始化 Python 日志系统。
    如果 YAML 配置文件不存在，回退到 basicConfig 基础配置。

    Args:
        config_path: Path to logging YAML config. Defaults to /config/logging.yaml.
        log_level_override: Override the root logger level.
        log_file_override: Override the file handler's filename.

    副作用:
        - 调用 logging.config.dictConfig 配置全局日志系统
        - 自动创建日志文件所在目录
    """
    config_path = config_path or CONFIG_DIR / "logging.yaml"
    config = load_yaml(config_path)

    if not config:
        logging.basicConfig(
            level=(log_level_override or "INFO").upper(),
            format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        )
        return

    if log_level_override:
        config.setdefault("root", {})["level"] = log_level_override.upper()

    if log_file_override:
        if "handlers" in config and "file" in config["handlers"]:
            config["handlers"]["file"]["filename"] = str(log_file_override)

    # 确保文件 handler 的目录存在，相对路径基于项目根目录
    for handler in config.get("handlers", {}).values():
        if "filename" in handler:
            filename = Path(handler["filename"])
            if not filename.is_absolute():
                filename = BASE_DIR / filename
            filename.parent.mkdir(parents=True, exist_ok=True)
            handler["filename"] = str(filename)

    logging.config.dictConfig(config)


def clear_config_cache() -> None:
    """Clear the configuration cache. Useful for testing."""
    global _config_cache
    _config_cache = None
