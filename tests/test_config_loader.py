"""Tests for config bootstrap: path resolution, fatal errors, in-memory configs."""

import json
from pathlib import Path

import pytest

from relay.config import ConfigParseError, ProjectionError, load_config, new_config_from_string
from relay.config.loader import DEFAULT_CONFIG_FILE, config_path


def test_config_path_explicit_wins(monkeypatch):
    monkeypatch.setenv("RELAY_CONFIG", "/etc/relay/env.toml")
    assert config_path("/tmp/explicit.yaml") == Path("/tmp/explicit.yaml")


def test_config_path_from_env(monkeypatch):
    monkeypatch.setenv("RELAY_CONFIG", "/etc/relay/env.toml")
    assert config_path() == Path("/etc/relay/env.toml")


def test_config_path_default():
    assert config_path() == Path(DEFAULT_CONFIG_FILE)
    assert config_path().name == "relay.toml"


def test_load_config_from_env_path(monkeypatch, toml_config):
    monkeypatch.setenv("RELAY_CONFIG", str(toml_config))
    config = load_config(open_log_file=False)
    assert config.path == toml_config
    assert config.get_string("irc.libera.Nick") == ("relaybot", True)


def test_load_config_missing_file_raises_os_error(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.toml")


def test_load_config_invalid_file_is_fatal(write_config):
    path = write_config("relay.json", '{"general": {')
    with pytest.raises(ConfigParseError) as exc_info:
        load_config(path)
    assert exc_info.value.format == "json"


def test_load_config_schema_mismatch_is_fatal(write_config):
    path = write_config("relay.yaml", "irc:\n  libera:\n    UseTLS: [1, 2]\n")
    with pytest.raises(ProjectionError):
        load_config(path)


def test_load_config_opens_log_file(write_config, tmp_path):
    log_path = tmp_path / "bridge.log"
    path = write_config("relay.toml", f"[general]\nLogFile = {json.dumps(str(log_path))}\n")
    load_config(path)
    assert log_path.exists()


def test_load_config_can_skip_log_file(write_config, tmp_path):
    log_path = tmp_path / "bridge.log"
    path = write_config("relay.toml", f"[general]\nLogFile = {json.dumps(str(log_path))}\n")
    config = load_config(path, open_log_file=False)
    assert config.typed_settings().general.log_file == str(log_path)
    assert not log_path.exists()


def test_custom_env_prefix(monkeypatch, toml_config):
    monkeypatch.setenv("MATTERBRIDGE_IRC_LIBERA_NICK", "legacy")
    config = load_config(toml_config, env_prefix="MATTERBRIDGE", open_log_file=False)
    assert config.get_string("irc.libera.Nick") == ("legacy", True)


def test_new_config_from_string_defaults_to_toml():
    config = new_config_from_string('[general]\nMediaDownloadSize = 10\n')
    assert config.document().format == "toml"
    assert config.typed_settings().general.media_download_size == 10
    assert config.get_int("general.MediaDownloadSize") == (10, True)


def test_new_config_from_string_other_formats():
    config = new_config_from_string('{"General": {"Nick": "j"}}', fmt="json")
    assert config.get_string("general.nick") == ("j", True)


def test_new_config_from_string_invalid():
    with pytest.raises(ConfigParseError):
        new_config_from_string("not = [valid")
