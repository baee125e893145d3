import pytest
from pydantic import ValidationError

from core.utils.settings import MediaSettings, get_settings


def test_defaults() -> None:
    settings = MediaSettings()

    assert settings.max_assets_per_parent == 20
    assert settings.max_file_size == 10 * 1024 * 1024
    assert settings.base_folder == "portfolio"
    assert "image/webp" in settings.allowed_content_types


def test_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv("MEDIA_MAX_ASSETS_PER_PARENT", "7")
    monkeypatch.setenv("MEDIA_PUBLIC_BASE_URL", "https://cdn.example.com")

    settings = get_settings()

    assert settings.max_assets_per_parent == 7
    assert settings.public_base_url == "https://cdn.example.com"


def test_rejects_non_positive_limit(monkeypatch) -> None:
    monkeypatch.setenv("MEDIA_MAX_ASSETS_PER_PARENT", "0")

    with pytest.raises(ValidationError):
        MediaSettings()


def test_cached() -> None:
    assert get_settings() is get_settings()


def test_default_lease_outlasts_remote_calls() -> None:
    settings = MediaSettings()

    assert settings.remote_call_budget == 105
    assert settings.lock_lease_seconds > settings.remote_call_budget


def test_rejects_lease_shorter_than_remote_calls(monkeypatch) -> None:
    monkeypatch.setenv("MEDIA_LOCK_LEASE_SECONDS", "60")

    with pytest.raises(ValidationError, match="remote call budget"):
        MediaSettings()


def test_longer_remote_timeouts_need_a_longer_lease(monkeypatch) -> None:
    monkeypatch.setenv("MEDIA_REMOTE_READ_TIMEOUT", "60")

    with pytest.raises(ValidationError):
        MediaSettings()

    monkeypatch.setenv("MEDIA_LOCK_LEASE_SECONDS", "300")
    assert MediaSettings().lock_lease_seconds == 300
