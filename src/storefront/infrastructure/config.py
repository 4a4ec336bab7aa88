"""Runtime settings read from the environment.

Values can also come from a ``.env`` file in the working directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///storefront.sqlite3"
    reservation_ttl: timedelta = timedelta(hours=24)
    retry_attempts: int = 3
    log_level: str = "INFO"
    currency: str = "ARS"


def _int(env: dict[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{key} must be positive, got {value}")
    return value


def load_settings(env: dict[str, str] | None = None) -> Settings:
    """Build Settings from ``env`` (defaults to ``os.environ`` plus ``.env``)."""
    if env is None:
        load_dotenv()
        env = dict(os.environ)

    defaults = Settings()
    return Settings(
        database_url=env.get("DATABASE_URL", defaults.database_url),
        reservation_ttl=timedelta(
            hours=_int(env, "STOREFRONT_RESERVATION_TTL_HOURS", 24)
        ),
        retry_attempts=_int(env, "STOREFRONT_RETRY_ATTEMPTS", defaults.retry_attempts),
        log_level=env.get("STOREFRONT_LOG_LEVEL", defaults.log_level).upper(),
        currency=env.get("STOREFRONT_CURRENCY", defaults.currency).upper(),
    )
