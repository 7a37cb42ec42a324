"""Pytest fixtures: sample configs in all three formats, clean env, logging reset."""

import json
import os
from pathlib import Path

import pytest
import yaml

from relay.logs import reset_logging

SAMPLE_TOML = r"""
[general]
RemoteNickFormat = "[{PROTOCOL}] <{NICK}> "
MediaDownloadBlackList = [".*\\.exe$", "("]
IgnoreFailureOnStart = false
MessageLength = 0

[irc.libera]
Server = "irc.libera.chat:6697"
Nick = "relaybot"
UseTLS = true
MessageDelay = 1300
ReplaceMessages = [["cat", "dog"], ["foo", "bar"]]
RunCommands = ["PRIVMSG nickserv :hello"]

[slack.myteam]
Token = "xoxb-token"
PreserveThreading = true

[tengo]
OutMessage = "out.tengo"

[[gateway]]
name = "lobby"
enable = true

    [[gateway.inout]]
    account = "irc.libera"
    channel = "#relay"
    options = { key = "secret" }

    [[gateway.inout]]
    account = "slack.myteam"
    channel = "general"

[[samechannelgateway]]
name = "shared"
enable = true
accounts = ["irc.libera", "slack.myteam"]
channels = ["#lobby"]
"""

# Same document as SAMPLE_TOML, used to produce the JSON and YAML variants
SAMPLE_DATA = {
    "general": {
        "RemoteNickFormat": "[{PROTOCOL}] <{NICK}> ",
        "MediaDownloadBlackList": [".*\\.exe$", "("],
        "IgnoreFailureOnStart": False,
        "MessageLength": 0,
    },
    "irc": {
        "libera": {
            "Server": "irc.libera.chat:6697",
            "Nick": "relaybot",
            "UseTLS": True,
            "MessageDelay": 1300,
            "ReplaceMessages": [["cat", "dog"], ["foo", "bar"]],
            "RunCommands": ["PRIVMSG nickserv :hello"],
        }
    },
    "slack": {"myteam": {"Token": "xoxb-token", "PreserveThreading": True}},
    "tengo": {"OutMessage": "out.tengo"},
    "gateway": [
        {
            "name": "lobby",
            "enable": True,
            "inout": [
                {"account": "irc.libera", "channel": "#relay", "options": {"key": "secret"}},
                {"account": "slack.myteam", "channel": "general"},
            ],
        }
    ],
    "samechannelgateway": [
        {
            "name": "shared",
            "enable": True,
            "accounts": ["irc.libera", "slack.myteam"],
            "channels": ["#lobby"],
        }
    ],
}

SAMPLE_JSON = json.dumps(SAMPLE_DATA, indent=2)
SAMPLE_YAML = yaml.safe_dump(SAMPLE_DATA, sort_keys=False)

SAMPLES = {
    "relay.toml": SAMPLE_TOML,
    "relay.json": SAMPLE_JSON,
    "relay.yaml": SAMPLE_YAML,
}


@pytest.fixture(autouse=True)
def clean_relay_env(monkeypatch):
    """No RELAY_* variable from the outer environment leaks into lookups."""
    for name in list(os.environ):
        if name.startswith("RELAY_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _reset_logging():
    """Each test starts and ends with default structlog and stderr output."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def write_config(tmp_path):
    """Write text to tmp_path/name and return the path."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def toml_config(write_config) -> Path:
    """Sample TOML config file."""
    return write_config("relay.toml", SAMPLE_TOML)
