from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

AppEnv = Literal["dev", "test", "prod"]
LogLevel = Literal["debug", "info", "warning", "error"]

_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off", "")


def _getenv(name: str, default: str) -> str:
    # Centralize env access so it’s easy to extend later (type casting, required vars)
    return os.environ.get(name, default).strip()


@dataclass(frozen=True)
class Settings:
    app_env: AppEnv
    log_level: LogLevel
    log_json: bool
    port: int | None  # None: each service uses its own default port
    database_url: str | None
    issuance_service_url: str
    issuance_timeout_seconds: float
    cors_origins: tuple[str, ...]

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def is_test(self) -> bool:
        return self.app_env == "test"

    @property
    def is_prod(self) -> bool:
        return self.app_env == "prod"


def load_settings() -> Settings:
    app_env_raw = _getenv("APP_ENV", "dev").lower()
    log_level_raw = _getenv("LOG_LEVEL", "info").lower()
    log_json_raw = _getenv("LOG_JSON", "false").lower()
    port_raw = _getenv("PORT", "")
    timeout_raw = _getenv("ISSUANCE_TIMEOUT_SECONDS", "5")

    if app_env_raw not in ("dev", "test", "prod"):
        raise ValueError(f"APP_ENV must be dev|test|prod (got {app_env_raw!r})")

    if log_level_raw not in ("debug", "info", "warning", "error"):
        raise ValueError(
            f"LOG_LEVEL must be debug|info|warning|error (got {log_level_raw!r})"
        )

    if log_json_raw not in _TRUTHY + _FALSY:
        raise ValueError(f"LOG_JSON must be a boolean (got {log_json_raw!r})")

    try:
        port = int(port_raw) if port_raw else None
    except ValueError:
        raise ValueError(f"PORT must be an integer (got {port_raw!r})") from None

    try:
        timeout = float(timeout_raw)
    except ValueError:
        raise ValueError(
            f"ISSUANCE_TIMEOUT_SECONDS must be a number (got {timeout_raw!r})"
        ) from None
    if timeout <= 0:
        raise ValueError(
            f"ISSUANCE_TIMEOUT_SECONDS must be positive (got {timeout_raw!r})"
        )

    database_url = _getenv("DATABASE_URL", "") or None
    issuance_url = _getenv("ISSUANCE_SERVICE_URL", "http://localhost:3001")
    cors_origins = tuple(
        origin.strip()
        for origin in _getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
        if origin.strip()
    )

    return Settings(  # type: ignore[arg-type]
        app_env=app_env_raw,
        log_level=log_level_raw,
        log_json=log_json_raw in _TRUTHY,
        port=port,
        database_url=database_url,
        issuance_service_url=issuance_url.rstrip("/"),
        issuance_timeout_seconds=timeout,
        cors_origins=cors_origins,
    )


# Optional: module-level singleton so imports are cheap
SETTINGS = load_settings()
