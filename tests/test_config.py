from __future__ import annotations

import pytest

from wealthwise import config as wealthwise_config
from wealthwise.config import BaseConfig


def test_data_dir_and_sqlite_url_follow_env(tmp_path, monkeypatch):
    monkeypatch.setenv("WEALTHWISE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("WEALTHWISE_DATABASE_URL", raising=False)

    config = BaseConfig()

    assert config.DATA_DIR == (tmp_path / "data").resolve()
    assert config.DATA_DIR.is_dir()
    assert config.DATABASE_URL.endswith("wealthwise.db")
    assert config.is_sqlite
    assert config.sqlalchemy_engine_options() == {"connect_args": {"check_same_thread": False}}


def test_production_requires_secrets(monkeypatch):
    monkeypatch.setenv("WEALTHWISE_DEV_MODE", "false")
    monkeypatch.setenv("WEALTHWISE_JWT_SECRET", "a" * 40)

    with pytest.raises(ValueError) as excinfo:
        BaseConfig()

    message = str(excinfo.value)
    assert "WEALTHWISE_SECRET_KEY" in message
    assert "WEALTHWISE_JWT_REFRESH_SECRET" in message
    assert "WEALTHWISE_JWT_SECRET," not in message


def test_integer_settings_are_validated(monkeypatch):
    monkeypatch.setenv("WEALTHWISE_JWT_ACCESS_MINUTES", "soon")

    with pytest.raises(ValueError, match="WEALTHWISE_JWT_ACCESS_MINUTES must be an integer"):
        BaseConfig()


def test_test_config_never_schedules(monkeypatch):
    monkeypatch.setenv("WEALTHWISE_SCHEDULER_ENABLED", "true")

    assert wealthwise_config.TestConfig().SCHEDULER_ENABLED is False
