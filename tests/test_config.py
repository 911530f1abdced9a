"""Tests for the settings snapshot."""

import pytest
from pydantic import ValidationError

from expensebot.core import config
from expensebot.core.config import Settings, get_settings, reload_settings, validate_settings


def test_settings_are_frozen():
    with pytest.raises(ValidationError):
        get_settings().EXPENSE_CHANNEL_ID = "other"


def test_reload_swaps_snapshot(monkeypatch):
    previous = get_settings()
    # Register the restore before reloading so teardown puts `previous` back
    monkeypatch.setattr(config, "_settings", previous)
    monkeypatch.setenv("EXPENSE_CHANNEL_ID", "claims")
    current = reload_settings()

    assert current is get_settings()
    assert current.EXPENSE_CHANNEL_ID == "claims"
    # Holders of the old snapshot are unaffected
    assert previous.EXPENSE_CHANNEL_ID == "finance"


def test_log_level_is_normalized():
    assert Settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"
    with pytest.raises(ValidationError):
        Settings(LOG_LEVEL="chatty")


def test_production_requires_chat_identity():
    settings = Settings(ENVIRONMENT="production", STORE_BACKEND="mongo", CHAT_BOT_TOKEN=None)

    with pytest.raises(ValueError) as exc_info:
        validate_settings(settings)

    assert "CHAT_BOT_TOKEN" in str(exc_info.value)


def test_memory_store_rejected_in_production():
    settings = Settings(
        ENVIRONMENT="production",
        STORE_BACKEND="memory",
        CHAT_BOT_TOKEN="t",
        BOT_USER_ID="bot",
        EXPENSE_CHANNEL_ID="finance",
    )

    with pytest.raises(ValueError):
        validate_settings(settings)


def test_test_settings_are_valid(settings):
    assert validate_settings(settings) is True


def test_bot_user_id_required_in_every_environment():
    settings = Settings(ENVIRONMENT="development", STORE_BACKEND="memory", BOT_USER_ID="")

    with pytest.raises(ValueError) as exc_info:
        validate_settings(settings)

    assert "BOT_USER_ID" in str(exc_info.value)
