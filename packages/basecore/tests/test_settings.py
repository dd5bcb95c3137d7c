"""
Tests for environment-driven settings.
"""

from basecore.settings import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("INAPP_STORAGE", raising=False)
    settings = Settings(_env_file=None)

    assert settings.INAPP_STORAGE == "memory"
    assert settings.INAPP_ANALYTICS_STREAM == "inapp:analytics"
    assert settings.INAPP_CONSUMER_GROUP == "inapp-engine"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("INAPP_STORAGE", "redis")
    monkeypatch.setenv("INAPP_BATCH_SIZE", "50")
    monkeypatch.setenv("LOG_JSON", "true")

    settings = Settings(_env_file=None)

    assert settings.INAPP_STORAGE == "redis"
    assert settings.INAPP_BATCH_SIZE == 50
    assert settings.LOG_JSON is True
