"""
Environment-driven settings.

Every value is read at call time so tests can override it with
`monkeypatch.setenv` without reloading modules.
"""

from __future__ import annotations

import os
from pathlib import Path

DEFAULT_DATABASE_URL = "sqlite:///data/meapi.db"

_PACKAGE_DIR = Path(__file__).resolve().parent.parent

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in _TRUE_VALUES


def database_url() -> str:
    return _env_str("DATABASE_URL", DEFAULT_DATABASE_URL)


def db_command_timeout() -> float:
    return _env_float("DB_COMMAND_TIMEOUT", 30.0)


def schema_path(dialect: str) -> Path:
    override = os.environ.get("SCHEMA_PATH", "").strip()
    if override:
        return Path(override)
    return _PACKAGE_DIR / "sql" / f"schema.{dialect}.sql"


def seed_path() -> Path:
    override = os.environ.get("SEED_PATH", "").strip()
    if override:
        return Path(override)
    return _PACKAGE_DIR / "data" / "seed.json"


def replace_atomic() -> bool:
    """
    Opt-in: run the whole profile replace inside one transaction.
    """
    return _env_bool("REPLACE_ATOMIC", False)


def cors_origins() -> list[str]:
    raw = _env_str("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()


def host() -> str:
    return _env_str("HOST", "0.0.0.0")


def port() -> int:
    return _env_int("PORT", 3000)


def client_base_url() -> str:
    return _env_str("MEAPI_BASE_URL", "http://localhost:3000").rstrip("/")


def client_retries() -> int:
    return max(0, _env_int("MEAPI_CLIENT_RETRIES", 3))


def client_timeout() -> float:
    return _env_float("MEAPI_CLIENT_TIMEOUT", 10.0)
