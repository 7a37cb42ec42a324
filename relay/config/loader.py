"""
Config bootstrap: read file, parse, project, compile blacklist, optionally start hot reload.

- Config path from the caller, else RELAY_CONFIG env, else relay.toml in the working directory.
- Format from the extension (.json, .yaml/.yml, anything else TOML).
- Environment overrides: RELAY_<SECTION>_<KEY> for section.key.
- Errors here are fatal for the process: a bridge must not run on a config that failed to load.
"""

import os
from pathlib import Path
from typing import Callable

import structlog

from relay.config.accessor import Config
from relay.config.document import ENV_PREFIX, DocumentStore, detect_config_type
from relay.config.projector import project
from relay.config.watcher import ConfigWatcher

logger = structlog.get_logger(__name__)

DEFAULT_CONFIG_FILE = "relay.toml"


def config_path(path: str | Path | None = None) -> Path:
    """Path to the config file; RELAY_CONFIG env or relay.toml when path is not given."""
    if path:
        return Path(path)
    return Path(os.environ.get(f"{ENV_PREFIX}_CONFIG", DEFAULT_CONFIG_FILE))


def load_config(
    path: str | Path | None = None,
    env_prefix: str = ENV_PREFIX,
    open_log_file: bool = True,
) -> Config:
    """
    Load and validate the config file.

    Args:
        path: Config file (default from config_path()).
        env_prefix: Prefix of overriding environment variables.
        open_log_file: Redirect log output to general.LogFile when it is set.

    Returns:
        Config with bootstrap snapshot and compiled blacklist.

    Raises:
        OSError: File cannot be read.
        ConfigParseError: File is not valid JSON/YAML/TOML.
        ProjectionError: File does not fit the settings schema.
    """
    cfg_path = config_path(path)
    data = cfg_path.read_bytes()
    fmt = detect_config_type(cfg_path)
    store = DocumentStore.load(data, fmt, env_prefix=env_prefix)
    if open_log_file:
        values = project(store)
    else:
        values = project(store, open_log_file=None)
    config = Config(store, values, path=cfg_path)
    logger.info("config_loaded", path=str(cfg_path), format=fmt)
    return config


def new_config_from_string(data: bytes | str, fmt: str = "toml", env_prefix: str = ENV_PREFIX) -> Config:
    """Config from in-memory text (TOML unless fmt says otherwise); no file, so no reload or log file."""
    store = DocumentStore.load(data, fmt, env_prefix=env_prefix)
    return Config(store, project(store, open_log_file=None))


def start_config_watcher(config: Config, on_reload: Callable[[Config], None] | None = None) -> ConfigWatcher:
    """
    Start background reload of config's file. Call stop() on the result at shutdown.

    on_reload is called with the config after each successful reload. The typed snapshot is
    not refreshed by reloads; only the get_* lookups and the blacklist follow the file.
    """
    watcher = ConfigWatcher(config, on_reload=on_reload)
    watcher.start()
    return watcher
