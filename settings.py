# =============================================================================
# 模块: settings.py
# 功能: GoodPlace 的全局应用配置模块
# 架构角色: 作为整个应用的配置中枢，提供统一的配置管理。
#   采用分层配置优先级机制，从高到低依次为：
#   1. 环境变量（运行时覆盖，适用于容器化部署）
#   2. .env 文件（存放敏感信息如 API 密钥、数据库密码）
#   3. config/defaults.yaml（非敏感默认值）
#   4. Python 代码中的硬编码默认值（兜底方案）
#
# 设计决策:
#   - 使用 pydantic-settings 的 BaseSettings 实现类型安全的配置
#   - YAML 文件在模块加载时一次性读取并缓存
#   - validation_alias 用于将大写的环境变量名映射到小写的 Python 属性名
#   - OpenAI 密钥不在 YAML 中设默认值，只通过环境变量或 .env 文件注入
# =============================================================================
"""Global application settings for GoodPlace.

Configuration precedence (highest to lowest):
1. Environment variables (runtime override)
2. .env file (secrets)
3. config/defaults.yaml (non-sensitive defaults)
4. Hardcoded Python defaults (fallback)
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from common.config_loader import get_config

# 项目根目录（settings.py 所在目录）
BASE_DIR = Path(__file__).resolve().parent

# 模块加载时一次性读取 YAML 配置，各配置段对应一个功能模块
_yaml_config = get_config()
_app_config = _yaml_config.get("app", {})              # 应用基本配置
_db_config = _yaml_config.get("database", {})           # 数据库配置
_ai_config = _yaml_config.get("classifier", {})         # LLM 分类器配置
_action_config = _yaml_config.get("action", {})         # 行为记录配置
_client_config = _yaml_config.get("client", {})         # 终端客户端配置


def _get_default_data_dir() -> Path:
    """Get default data directory.

    YAML 中的相对路径基于 BASE_DIR 解析为绝对路径。
    """
    path = Path(_app_config.get("data_dir", "./data"))
    if not path.is_absolute():
        return BASE_DIR / path
    return path


# =============================================================================
# Settings 类: 全局配置类
# 设计决策:
#   - 每个字段使用 validation_alias 映射环境变量名（大写形式）
#   - default 值优先从 YAML 缓存中获取，找不到时使用硬编码默认值
#   - database_url 为派生属性，按 DATABASE_URL > MySQL > SQLite 的顺序选择
# =============================================================================
class Settings(BaseSettings):
    """Global application settings."""

    # ======================== 应用基本配置 ========================
    app_name: str = Field(
        default=_app_config.get("name", "GoodPlace"),
        validation_alias="APP_NAME",
    )
    debug: bool = Field(
        default=_app_config.get("debug", False),
        validation_alias="DEBUG",
    )
    app_host: str = Field(
        default=_app_config.get("host", "0.0.0.0"),
        validation_alias="APP_HOST",
    )
    app_port: int = Field(
        default=_app_config.get("port", 8000),
        validation_alias="APP_PORT",
    )
    data_dir: Path = Field(
        default=_get_default_data_dir(),
        validation_alias="DATA_DIR",
    )
    # CORS 来源列表，逗号分隔；"*" 允许所有来源
    cors_origins: str = Field(
        default=_app_config.get("cors_origins", "*"),
        validation_alias="CORS_ORIGINS",
    )

    # ======================== 数据库配置 ========================
    # 显式指定的连接串优先，例如 sqlite+aiosqlite:///./data/goodplace.db
    database_url_override: str = Field(
        default=_db_config.get("url", ""),
        validation_alias="DATABASE_URL",
    )
    # 配置了 DB_HOST 时使用 MySQL（aiomysql 驱动）
    db_host: str = Field(default="", validation_alias="DB_HOST")
    db_port: int = Field(default=3306, validation_alias="DB_PORT")
    db_name: str = Field(default="goodplace", validation_alias="DB_NAME")
    db_user: str = Field(default="goodplace", validation_alias="DB_USER")
    db_password: str = Field(default="", validation_alias="DB_PASSWORD")
    db_pool_size: int = Field(
        default=_db_config.get("pool_size", 10),
        validation_alias="DB_POOL_SIZE",
    )
    db_max_overflow: int = Field(
        default=_db_config.get("max_overflow", 20),
        validation_alias="DB_MAX_OVERFLOW",
    )
    db_pool_recycle: int = Field(
        default=_db_config.get("pool_recycle", 3600),
        validation_alias="DB_POOL_RECYCLE",
    )
    db_echo: bool = Field(
        default=_db_config.get("echo", False),
        validation_alias="DB_ECHO",
    )

    # ======================== LLM 分类器配置 ========================
    classifier_provider: str = Field(
        default=_ai_config.get("provider", "openai"),
        validation_alias="CLASSIFIER_PROVIDER",
    )
    openai_api_key: str = Field(default="", validation_alias="OPENAI_API_KEY")
    openai_model: str = Field(
        default=_ai_config.get("openai_model", "gpt-4o-mini"),
        validation_alias="OPENAI_MODEL",
    )
    openai_base_url: str = Field(
        default=_ai_config.get("openai_base_url", "https://api.openai.com/v1"),
        validation_alias="OPENAI_BASE_URL",
    )
    openai_timeout: int = Field(
        default=_ai_config.get("openai_timeout", 60),
        validation_alias="OPENAI_TIMEOUT",
    )
    # 调用次数上限；1 表示只调用一次，不做重试
    ai_max_retries: int = Field(
        default=_ai_config.get("max_retries", 1),
        validation_alias="AI_MAX_RETRIES",
    )
    ai_retry_base_delay: float = Field(
        default=_ai_config.get("retry_base_delay", 1.0),
        validation_alias="AI_RETRY_BASE_DELAY",
    )

    # ======================== 行为记录配置 ========================
    # GET /user/{id} 返回的最近行为条数
    history_limit: int = Field(
        default=_action_config.get("history_limit", 20),
        validation_alias="HISTORY_LIMIT",
    )

    # ======================== 终端客户端配置 ========================
    client_api_url: str = Field(
        default=_client_config.get("api_url", "http://localhost:8000"),
        validation_alias="GOODPLACE_API_URL",
    )
    client_storage_path: Path = Field(
        default=Path(_client_config.get("storage_path", "~/.goodplace/storage.json")),
        validation_alias="GOODPLACE_STORAGE",
    )
    client_log_file: Path = Field(
        default=Path(_client_config.get("log_file", "~/.goodplace/client.log")),
        validation_alias="GOODPLACE_LOG_FILE",
    )

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("ai_max_retries", mode="before")
    @classmethod
    def at_least_one_attempt(cls, v: int) -> int:
        """Clamp the attempt count to at least one call.

        尝试次数至少为 1，0 或负数会让 tenacity 一次都不调用。
        """
        return max(1, int(v))

    @property
    def database_url(self) -> str:
        """Build the async database URL.

        返回值:
            str: DATABASE_URL 覆盖值；否则 DB_HOST 非空时为 MySQL 连接串；
                 都没有配置时为数据目录下的 SQLite 文件
        """
        if self.database_url_override:
            return self.database_url_override
        if self.db_host:
            from urllib.parse import quote_plus
            encoded_password = quote_plus(self.db_password)
            return (
                f"mysql+aiomysql://{self.db_user}:{encoded_password}"
                f"@{self.db_host}:{self.db_port}/{self.db_name}"
            )
        return f"sqlite+aiosqlite:///{self.data_dir / 'goodplace.db'}"

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite (no pool options)."""
        return self.database_url.startswith("sqlite")


# 创建全局配置单例
# 整个应用通过 from settings import settings 引用此实例
settings = Settings()
