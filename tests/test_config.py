"""
Tests for environment-driven settings.
"""

from pathlib import Path

import pytest

from ordertracker.config import Settings

ENV_VARS = [
    "HOST",
    "PORT",
    "AFTERSHIP_API_KEY",
    "GOOGLE_API_KEY",
    "GOOGLE_GENAI_USE_VERTEXAI",
    "ORDER_TRACKER_MODEL",
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USER",
    "SMTP_PASSWORD",
    "SMTP_FROM_EMAIL",
    "SMTP_TIMEOUT",
    "GMAIL_CLIENT_ID",
    "GMAIL_CLIENT_SECRET",
    "GMAIL_REFRESH_TOKEN",
    "GEOCODE_CACHE_FILE",
    "SUBSCRIPTIONS_FILE",
    "STREAM_INTERVAL_SECONDS",
    "MAP_MODE",
    "GMAPS_API_KEY",
    "ADMIN_TOKEN",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults_disable_integrations(clean_env):
    settings = Settings.from_env()

    assert settings.port == 3000
    assert not settings.ai_enabled
    assert not settings.carrier_enabled
    assert not settings.email_enabled
    assert not settings.gmail_enabled
    assert settings.map_mode == "leaflet"
    assert settings.stream_interval_seconds == 10
    assert settings.admin_token is None


def test_integrations_from_env(clean_env, tmp_path):
    clean_env.setenv("AFTERSHIP_API_KEY", "as-key")
    clean_env.setenv("GOOGLE_GENAI_USE_VERTEXAI", "TRUE")
    clean_env.setenv("SMTP_HOST", "smtp.example.com")
    clean_env.setenv("SMTP_USER", "mailer@example.com")
    clean_env.setenv("GMAIL_CLIENT_ID", "id")
    clean_env.setenv("GMAIL_CLIENT_SECRET", "secret")
    clean_env.setenv("GMAIL_REFRESH_TOKEN", "token")
    clean_env.setenv("SUBSCRIPTIONS_FILE", str(tmp_path / "subs.json"))

    settings = Settings.from_env()

    assert settings.carrier_enabled
    assert settings.ai_enabled
    assert settings.gmail_enabled
    # Sender falls back to the SMTP login
    assert settings.smtp_from_email == "mailer@example.com"
    assert settings.email_enabled
    assert settings.subscriptions_file == Path(tmp_path / "subs.json")


def test_bad_integers_fall_back(clean_env):
    clean_env.setenv("PORT", "eighty")
    clean_env.setenv("STREAM_INTERVAL_SECONDS", "")

    settings = Settings.from_env()

    assert settings.port == 3000
    assert settings.stream_interval_seconds == 10
