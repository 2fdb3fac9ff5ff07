"""CLI commands against the fake backend."""

import functools
import json

import httpx
import pytest
from click.testing import CliRunner

from quickchat.client import AsyncChatApp
from quickchat.cli.main import main


@pytest.fixture
def cli(tmp_path, monkeypatch, backend):
    config = tmp_path / "config.json"
    monkeypatch.setattr("quickchat.cli.main.CONFIG_FILE", config)
    monkeypatch.setattr(
        "quickchat.cli.main.AsyncChatApp",
        functools.partial(AsyncChatApp, transport=httpx.MockTransport(backend.handler)),
    )
    monkeypatch.delenv("QUICKCHAT_SERVER_URL", raising=False)
    runner = CliRunner()

    def invoke(*args):
        return runner.invoke(main, ["--server-url", "http://chat.test", *args])

    invoke.config = config
    return invoke


def read_config(path):
    return json.loads(path.read_text()) if path.exists() else {}


def test_login_stores_token_and_server_url(cli):
    result = cli("auth", "login", "--token", "T1")
    assert result.exit_code == 0, result.output
    assert "Logged in as Ada" in result.output
    assert read_config(cli.config) == {"server_url": "http://chat.test", "token": "T1"}


def test_login_with_rejected_token(cli):
    result = cli("auth", "login", "--token", "bogus")
    assert result.exit_code == 1
    assert "Session expired" in result.output
    assert "token" not in read_config(cli.config)


def test_status_and_logout(cli):
    assert "Not logged in" in cli("auth", "status").output
    cli("auth", "login", "--token", "T2")
    assert "Grace" in cli("auth", "status").output
    result = cli("auth", "logout")
    assert result.exit_code == 0
    assert "token" not in read_config(cli.config)


def test_chats_list_json(cli):
    cli("auth", "login", "--token", "T1")
    result = cli("chats", "list", "--json")
    assert result.exit_code == 0, result.output
    assert [c["id"] for c in json.loads(result.output)] == ["b", "c", "a"]


def test_chats_new(cli, backend):
    cli("auth", "login", "--token", "T1")
    result = cli("chats", "new")
    assert result.exit_code == 0, result.output
    assert "Chat created: new3" in result.output
    assert len(backend.chats["u1"]) == 4


def test_chats_require_login(cli, backend):
    assert cli("chats", "list").exit_code == 1
    result = cli("chats", "new")
    assert result.exit_code == 1
    assert "Login to create a new chat" in result.output
    assert backend.requests == []


def test_theme(cli):
    assert "light" in cli("theme").output
    assert "dark" in cli("theme", "toggle").output
    assert read_config(cli.config)["theme"] == "dark"
    assert cli("theme", "blue").exit_code == 2
