# =============================================================================
# 模块: common/logger.py
# 功能: 日志系统初始化的便捷封装
# 架构角色: 封装 config_loader 中的 YAML 日志配置逻辑，
#   为服务端 main.py 和终端客户端提供统一的日志初始化入口。
# =============================================================================
"""Logging setup for GoodPlace.

Uses YAML-based configuration from /config/logging.yaml with optional
runtime overrides for log level and log file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from common.config_loader import setup_logging_from_yaml


def setup_logging(log_level: str = "INFO", log_file: Optional[Path] = None) -> None:
    """Setup logging using YAML config with optional overrides.

    Args:
        log_level: Override the root logger level (default: INFO).
        log_file: Override the file handler's filename (optional).
    """
    setup_logging_from_yaml(
        log_level_override=log_level,
        log_file_override=log_file,
    )
