"""
Development identity.

With ``DEV_MODE`` on, every request acts as one fixed local user who owns
whatever estates it creates. That identity is only honoured when the service
is addressed through a local host, or one listed in ``DEV_MODE_ALLOWED_HOSTS``.
"""
from typing import Optional, Tuple
from urllib.parse import urlsplit

from estate_core.utils.settings import Settings, get_settings

DEV_USER_EMAIL = "dev@localhost"
DEV_USER_NAME = "Development User"


class DevModeMisconfigured(RuntimeError):
    """DEV_MODE was switched on for a deployment that is not local."""


def base_url_host(base_url: str) -> Optional[str]:
    """Hostname of ``APP_BASE_URL``; accepts bare ``host:port`` values."""
    value = (base_url or "").strip()
    if not value:
        return None
    if "://" not in value:
        value = f"//{value}"
    return urlsplit(value).hostname


def check_dev_mode(settings: Settings) -> bool:
    if not settings.dev_mode:
        return False
    host = base_url_host(settings.app_base_url)
    if host is None:
        if settings.allow_dev_mode:
            return True
        raise DevModeMisconfigured(
            "DEV_MODE needs APP_BASE_URL on a local host, or ALLOW_DEV_MODE=true"
        )
    if host.lower() not in settings.dev_mode_hosts:
        raise DevModeMisconfigured(
            f"DEV_MODE is not allowed for APP_BASE_URL host '{host}'; "
            f"allowed hosts: {sorted(settings.dev_mode_hosts)}"
        )
    return True


def dev_mode_active() -> bool:
    """Whether requests should run as the development user."""
    return check_dev_mode(get_settings())


def dev_identity() -> Tuple[str, str]:
    """Return the (display name, email) used when dev mode is active."""
    return DEV_USER_NAME, DEV_USER_EMAIL
