"""
Tests for the messaging-inapp CLI.
"""

import json
from unittest.mock import AsyncMock

import pytest
from typer.testing import CliRunner

from conftest import make_message
from messaging_inapp.cli import main as cli
from messaging_inapp.engine import InAppMessaging
from messaging_inapp.hub import Hub
from messaging_inapp.providers.stub import StubInAppMessagingProvider
from messaging_inapp.storage.memory import MemoryStorage

runner = CliRunner()


@pytest.fixture
def cli_storage():
    return MemoryStorage()


@pytest.fixture
def cli_provider():
    return StubInAppMessagingProvider(name="push", messages=[make_message("push-1")])


@pytest.fixture(autouse=True)
def cli_engine(monkeypatch, cli_storage, cli_provider):
    """Point the CLI at an in-memory engine with one stub provider."""

    def get_engine(listen=False):
        engine = InAppMessaging(storage=cli_storage, hub=Hub(), default_provider_factory=None)
        engine.add_pluggable(cli_provider)
        engine.configure({"listenForAnalyticsEvents": listen})
        return engine

    monkeypatch.setattr(cli, "get_engine", get_engine)
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)


def test_sync(cli_storage, cli_provider):
    result = runner.invoke(cli.app, ["sync"])

    assert result.exit_code == 0
    assert "Synced 1 provider(s): push" in result.output
    assert json.loads(cli_storage.items["push_inAppMessages"]) == cli_provider.messages
    assert cli_provider.closed is True


def test_sync_failure(cli_provider):
    cli_provider.fail_fetch = True

    result = runner.invoke(cli.app, ["sync"])

    assert result.exit_code == 1
    assert "Sync failed" in result.output


def test_clear(cli_storage):
    cli_storage.items["push_inAppMessages"] = "[]"

    result = runner.invoke(cli.app, ["clear"])

    assert result.exit_code == 0
    assert "Cleared in-app messages" in result.output
    assert cli_storage.items == {}


def test_show_cache(cli_storage):
    cli_storage.items["push_inAppMessages"] = json.dumps([make_message("push-1")])

    result = runner.invoke(cli.app, ["show-cache"])

    assert result.exit_code == 0
    assert "push-1" in result.output


def test_show_cache_unreadable(cli_storage):
    cli_storage.items["push_inAppMessages"] = "{broken"

    result = runner.invoke(cli.app, ["show-cache"])

    assert result.exit_code == 0
    assert "unreadable" in result.output


def test_record_matches(cli_storage):
    cli_storage.items["push_inAppMessages"] = json.dumps([make_message("push-1")])

    result = runner.invoke(cli.app, ["record", "purchase", "--attr", "plan=pro", "--metric", "amount=10"])

    assert result.exit_code == 0
    assert "push-1" in result.output


def test_record_no_match():
    result = runner.invoke(cli.app, ["record", "signup"])

    assert result.exit_code == 0
    assert "No messages matched 'signup'" in result.output


def test_record_invalid_attribute():
    result = runner.invoke(cli.app, ["record", "purchase", "--attr", "plan"])

    assert result.exit_code == 1
    assert "expected KEY=VALUE" in result.output


def test_record_invalid_metric():
    result = runner.invoke(cli.app, ["record", "purchase", "--metric", "amount=lots"])

    assert result.exit_code == 1
    assert "Metric values must be numbers" in result.output


def test_record_publish(monkeypatch):
    client = AsyncMock()
    client.xadd.return_value = "1-0"
    monkeypatch.setattr(cli, "get_redis", lambda: client)

    result = runner.invoke(cli.app, ["record", "purchase", "--publish"])

    assert result.exit_code == 0
    assert "Published record 'purchase' (1-0)" in result.output
    client.xadd.assert_awaited_once()
