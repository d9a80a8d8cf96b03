"""Tests for environment-driven application settings."""

import pytest
from pydantic import ValidationError

from petvalues.core.config import AppSettings


def test_login_throttle_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("APP_LOGIN_RATE_LIMIT_WINDOW_MS", raising=False)
    monkeypatch.delenv("APP_LOGIN_RATE_LIMIT_MAX_ATTEMPTS", raising=False)

    app_settings = AppSettings()

    assert app_settings.login_rate_limit_window_ms == 120_000
    assert app_settings.login_rate_limit_max_attempts == 1


def test_env_overrides_window(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_LOGIN_RATE_LIMIT_WINDOW_MS", "5000")

    assert AppSettings().login_rate_limit_window_ms == 5000


@pytest.mark.parametrize(
    "env_name",
    ["APP_LOGIN_RATE_LIMIT_WINDOW_MS", "APP_LOGIN_RATE_LIMIT_MAX_ATTEMPTS"],
)
def test_non_positive_throttle_values_are_rejected(
    monkeypatch: pytest.MonkeyPatch, env_name: str
) -> None:
    monkeypatch.setenv(env_name, "0")

    with pytest.raises(ValidationError):
        AppSettings()


def test_only_consumed_app_settings_are_declared() -> None:
    assert "debug" not in AppSettings.model_fields
