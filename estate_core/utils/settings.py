"""Runtime settings sourced from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, FrozenSet

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}

LOCAL_HOSTS: FrozenSet[str] = frozenset({"localhost", "127.0.0.1", "::1"})


@dataclass(frozen=True)
class IntSettingDefinition:
    env_var: str
    default: int
    minimum: int = 1


@dataclass(frozen=True)
class Settings:
    log_level: str
    app_base_url: str
    dev_mode: bool
    allow_dev_mode: bool
    dev_mode_hosts: FrozenSet[str]
    activity_page_default: int
    activity_page_max: int
    invite_ttl_days: int
    invite_pending_limit: int


_INT_SETTING_DEFINITIONS: Dict[str, IntSettingDefinition] = {
    "activity_page_default": IntSettingDefinition("ACTIVITY_PAGE_DEFAULT", 25),
    "activity_page_max": IntSettingDefinition("ACTIVITY_PAGE_MAX", 100),
    "invite_ttl_days": IntSettingDefinition("INVITE_TTL_DAYS", 7),
    "invite_pending_limit": IntSettingDefinition("INVITE_PENDING_LIMIT", 50),
}


def _normalize_int(value: str | None, definition: IntSettingDefinition) -> int:
    """Return a bounded integer from an environment-style value."""
    if value is None:
        return definition.default
    try:
        parsed = int(value.strip())
    except ValueError:
        return definition.default
    if parsed < definition.minimum:
        return definition.default
    return parsed


def _normalize_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    return default


def _normalize_hosts(value: str | None) -> FrozenSet[str]:
    extra = {host.strip().lower() for host in (value or "").split(",") if host.strip()}
    return LOCAL_HOSTS | extra


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    """Return the cached settings sourced from the environment."""
    values = {
        key: _normalize_int(os.getenv(definition.env_var), definition)
        for key, definition in _INT_SETTING_DEFINITIONS.items()
    }
    # Default never exceeds the cap
    if values["activity_page_default"] > values["activity_page_max"]:
        values["activity_page_default"] = values["activity_page_max"]
    return Settings(
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        app_base_url=os.getenv("APP_BASE_URL", "").strip().rstrip("/"),
        dev_mode=_normalize_bool(os.getenv("DEV_MODE")),
        allow_dev_mode=_normalize_bool(os.getenv("ALLOW_DEV_MODE")),
        dev_mode_hosts=_normalize_hosts(os.getenv("DEV_MODE_ALLOWED_HOSTS")),
        **values,
    )


def refresh_settings_cache() -> None:
    """Invalidate cached settings (useful for tests)."""
    get_settings.cache_clear()
