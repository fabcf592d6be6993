import pytest
from pydantic import ValidationError

from user_directory_client.config.settings import Settings

_ENV_KEYS = (
    "USERS_API_BASE_URL",
    "USERS_API_TIMEOUT_SECONDS",
    "NOTIFICATION_DURATION_SECONDS",
    "LOG_LEVEL",
    "LOG_FILE",
)


def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_are_deterministic(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)

    settings = Settings(_env_file=None)

    assert str(settings.users_api_base_url) == "http://localhost:3000/"
    assert settings.users_api_timeout_seconds == 10.0
    assert settings.notification_duration_seconds == 3.0
    assert settings.log_level == "INFO"
    assert settings.log_file is None


def test_env_overrides_are_applied(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("USERS_API_BASE_URL", "https://directory.example.org")
    monkeypatch.setenv("USERS_API_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("NOTIFICATION_DURATION_SECONDS", "0.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert str(settings.users_api_base_url) == "https://directory.example.org/"
    assert settings.users_api_timeout_seconds == 2.5
    assert settings.notification_duration_seconds == 0.5
    assert settings.log_level == "debug"


def test_invalid_base_url_raises_validation_error(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("USERS_API_BASE_URL", "not-a-url")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_notification_duration_must_be_positive(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("NOTIFICATION_DURATION_SECONDS", "0")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)
