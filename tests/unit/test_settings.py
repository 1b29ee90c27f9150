import pytest

from estate_core.utils.settings import get_settings, refresh_settings_cache

_ENV_NAMES = (
    "ACTIVITY_PAGE_DEFAULT",
    "ACTIVITY_PAGE_MAX",
    "INVITE_TTL_DAYS",
    "INVITE_PENDING_LIMIT",
    "LOG_LEVEL",
    "APP_BASE_URL",
    "DEV_MODE",
    "ALLOW_DEV_MODE",
    "DEV_MODE_ALLOWED_HOSTS",
)


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Clear env + cached values for each test to avoid cross-contamination."""
    for env_name in _ENV_NAMES:
        monkeypatch.delenv(env_name, raising=False)
    refresh_settings_cache()
    yield
    refresh_settings_cache()


def test_defaults():
    settings = get_settings()
    assert settings.activity_page_default == 25
    assert settings.activity_page_max == 100
    assert settings.invite_ttl_days == 7
    assert settings.invite_pending_limit == 50
    assert settings.log_level == "INFO"
    assert settings.app_base_url == ""
    assert settings.dev_mode is False
    assert settings.dev_mode_hosts == {"localhost", "127.0.0.1", "::1"}


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("ACTIVITY_PAGE_DEFAULT", "10")
    monkeypatch.setenv("ACTIVITY_PAGE_MAX", "40")
    monkeypatch.setenv("INVITE_TTL_DAYS", "2")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("APP_BASE_URL", "https://estates.example.com/")
    monkeypatch.setenv("DEV_MODE", "ON")
    monkeypatch.setenv("DEV_MODE_ALLOWED_HOSTS", " Box.Local ,")
    refresh_settings_cache()
    settings = get_settings()
    assert settings.activity_page_default == 10
    assert settings.activity_page_max == 40
    assert settings.invite_ttl_days == 2
    assert settings.log_level == "DEBUG"
    assert settings.app_base_url == "https://estates.example.com"
    assert settings.dev_mode is True
    assert "box.local" in settings.dev_mode_hosts


@pytest.mark.parametrize("raw", ["abc", "0", "-3", ""])
def test_invalid_values_fall_back_to_defaults(monkeypatch, raw):
    monkeypatch.setenv("ACTIVITY_PAGE_MAX", raw)
    refresh_settings_cache()
    assert get_settings().activity_page_max == 100


def test_unrecognized_boolean_is_off(monkeypatch):
    monkeypatch.setenv("DEV_MODE", "maybe")
    refresh_settings_cache()
    assert get_settings().dev_mode is False


def test_default_is_capped_by_max(monkeypatch):
    monkeypatch.setenv("ACTIVITY_PAGE_DEFAULT", "50")
    monkeypatch.setenv("ACTIVITY_PAGE_MAX", "20")
    refresh_settings_cache()
    assert get_settings().activity_page_default == 20


def test_settings_are_cached(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("ACTIVITY_PAGE_MAX", "7")
    assert get_settings() is first
    refresh_settings_cache()
    assert get_settings().activity_page_max == 7
