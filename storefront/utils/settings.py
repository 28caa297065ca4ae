"""Runtime settings sourced from the environment."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from datetime import timedelta
from functools import lru_cache
from typing import FrozenSet, Tuple


DEFAULT_CORS_ORIGINS: Tuple[str, ...] = (
    "http://localhost:3000",
    "http://localhost:3001",
)

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.IGNORECASE)
_DURATION_UNITS = {
    "": "seconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
}


@dataclass(frozen=True)
class Settings:
    jwt_secret: str
    jwt_expires_in: timedelta
    jwt_algorithm: str
    cors_origins: Tuple[str, ...]
    rate_limit_max: int
    rate_limit_window_seconds: int
    low_stock_threshold: int
    log_level: str
    admin_emails: FrozenSet[str] = field(default_factory=frozenset)


def parse_duration(value: str | None, default: timedelta) -> timedelta:
    """Parse '7d', '12h', '30m', '45s' or bare seconds into a timedelta.

    Unparsable values fall back to ``default``.
    """
    if not value:
        return default
    match = _DURATION_RE.match(value)
    if not match:
        return default
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit.lower()]: int(amount)})


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _normalize_list_env(var_name: str) -> FrozenSet[str]:
    raw = os.getenv(var_name, "")
    values = set()
    for entry in raw.split(","):
        cleaned = entry.strip().strip('"').strip("'")
        if cleaned:
            values.add(cleaned.lower())
    return frozenset(values)


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    """Return cached settings built from environment variables."""
    origins = list(DEFAULT_CORS_ORIGINS)
    frontend_url = (os.getenv("FRONTEND_URL") or "").strip()
    if frontend_url and frontend_url not in origins:
        origins.append(frontend_url)

    return Settings(
        jwt_secret=os.getenv("JWT_SECRET", "fallback-secret"),
        jwt_expires_in=parse_duration(os.getenv("JWT_EXPIRES_IN"), timedelta(days=7)),
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        cors_origins=tuple(origins),
        rate_limit_max=_int_env("RATE_LIMIT_MAX", 100),
        rate_limit_window_seconds=_int_env("RATE_LIMIT_WINDOW_SECONDS", 15 * 60),
        low_stock_threshold=_int_env("LOW_STOCK_THRESHOLD", 5),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        admin_emails=_normalize_list_env("ADMIN_EMAILS"),
    )


def refresh_settings_cache() -> None:
    """Invalidate cached settings (useful for tests)."""
    get_settings.cache_clear()
