"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()

_DEFAULT_SECRET = "replace-me"
_DEFAULT_JWT_SECRET = "dev-access-secret-key-change-me-in-production"
_DEFAULT_JWT_REFRESH_SECRET = "dev-refresh-secret-key-change-me-in-production"


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "WealthWise"
    DB_FILENAME = "wealthwise.db"
    SQLITE_PRAGMAS = {"journal_mode": "wal", "foreign_keys": "on"}
    DEBUG = False
    TESTING = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("WEALTHWISE_SECRET_KEY", _DEFAULT_SECRET)
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("WEALTHWISE_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("WEALTHWISE_DATABASE_URL", self._build_sqlite_url())

        self.JWT_SECRET = os.getenv("WEALTHWISE_JWT_SECRET", _DEFAULT_JWT_SECRET)
        self.JWT_REFRESH_SECRET = os.getenv(
            "WEALTHWISE_JWT_REFRESH_SECRET", _DEFAULT_JWT_REFRESH_SECRET
        )
        self.JWT_ACCESS_MINUTES = _env_int("WEALTHWISE_JWT_ACCESS_MINUTES", 15)
        self.JWT_REFRESH_DAYS = _env_int("WEALTHWISE_JWT_REFRESH_DAYS", 7)

        self.SCHEDULER_ENABLED = _env_bool("WEALTHWISE_SCHEDULER_ENABLED", default=False)
        self.CORS_ORIGIN = os.getenv("WEALTHWISE_CORS_ORIGIN", "http://localhost:5173")
        self.IMPORT_MAX_BYTES = _env_int("WEALTHWISE_IMPORT_MAX_BYTES", 5 * 1024 * 1024)

        if not self.DEV_MODE:
            self._require_production_secrets()

    def _require_production_secrets(self) -> None:
        missing = []
        if self.SECRET_KEY == _DEFAULT_SECRET:
            missing.append("WEALTHWISE_SECRET_KEY")
        if self.JWT_SECRET == _DEFAULT_JWT_SECRET:
            missing.append("WEALTHWISE_JWT_SECRET")
        if self.JWT_REFRESH_SECRET == _DEFAULT_JWT_REFRESH_SECRET:
            missing.append("WEALTHWISE_JWT_REFRESH_SECRET")
        if missing:
            raise ValueError(f"{', '.join(missing)} must be set in non-dev mode.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("WEALTHWISE_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        engine_options: dict[str, Any] = {}
        if self.is_sqlite:
            engine_options["connect_args"] = {"check_same_thread": False}
        return engine_options


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Configuration used by the test-suite; never starts background jobs."""

    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.SCHEDULER_ENABLED = False
