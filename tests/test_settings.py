"""Tests for settings.py: configuration loading and validation.

针对配置加载与校验逻辑的测试用例集合。
"""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def clean_env(monkeypatch):
    """Remove environment variables that would change database selection."""
    for name in ("DATABASE_URL", "DB_HOST", "DB_PASSWORD", "AI_MAX_RETRIES", "HISTORY_LIMIT"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettingsDefaults:
    """Verify Settings fields and YAML-backed defaults.

    验证配置字段默认值来自 config/defaults.yaml。
    """

    def test_app_name(self, clean_env):
        from settings import Settings

        assert Settings().app_name == "GoodPlace"

    def test_history_limit_default(self, clean_env):
        from settings import Settings

        assert Settings().history_limit == 20

    def test_single_attempt_by_default(self, clean_env):
        from settings import Settings

        assert Settings().ai_max_retries == 1

    def test_data_dir_is_absolute(self, clean_env):
        from settings import Settings

        assert Path(Settings().data_dir).is_absolute()


class TestDatabaseUrl:
    """DATABASE_URL > MySQL (DB_HOST) > SQLite file."""

    def test_sqlite_fallback(self, clean_env):
        from settings import Settings

        s = Settings()
        assert s.database_url.startswith("sqlite+aiosqlite:///")
        assert s.database_url.endswith("goodplace.db")
        assert s.is_sqlite

    def test_mysql_when_host_configured(self, clean_env):
        from settings import Settings

        clean_env.setenv("DB_HOST", "db.internal")
        clean_env.setenv("DB_PASSWORD", "p@ss word")
        s = Settings()
        assert s.database_url.startswith("mysql+aiomysql://goodplace:")
        assert "p%40ss+word" in s.database_url
        assert s.database_url.endswith("@db.internal:3306/goodplace")
        assert not s.is_sqlite

    def test_explicit_url_wins(self, clean_env):
        from settings import Settings

        clean_env.setenv("DB_HOST", "db.internal")
        clean_env.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
        assert Settings().database_url == "sqlite+aiosqlite:///:memory:"


class TestValidators:

    def test_attempts_clamped_to_one(self, clean_env):
        from settings import Settings

        clean_env.setenv("AI_MAX_RETRIES", "0")
        assert Settings().ai_max_retries == 1

    def test_attempts_from_env(self, clean_env):
        from settings import Settings

        clean_env.setenv("AI_MAX_RETRIES", "3")
        assert Settings().ai_max_retries == 3

    def test_history_limit_from_env(self, clean_env):
        from settings import Settings

        clean_env.setenv("HISTORY_LIMIT", "5")
        assert Settings().history_limit == 5
