"""Configuration loading, typed settings, overrides, hot reload, and the message records bridges exchange."""

from relay.config.accessor import Config, ConfigAccessor
from relay.config.errors import ConfigError, ConfigParseError, ConfigTypeError, ProjectionError
from relay.config.loader import load_config, new_config_from_string, start_config_watcher
from relay.config.message import (
    PARENT_ID_NOT_FOUND,
    ChannelInfo,
    ChannelMember,
    FileInfo,
    Message,
    get_icon_url,
)
from relay.config.overrides import OverrideConfig

__all__ = [
    "PARENT_ID_NOT_FOUND",
    "ChannelInfo",
    "ChannelMember",
    "Config",
    "ConfigAccessor",
    "ConfigError",
    "ConfigParseError",
    "ConfigTypeError",
    "FileInfo",
    "Message",
    "OverrideConfig",
    "ProjectionError",
    "get_icon_url",
    "load_config",
    "new_config_from_string",
    "start_config_watcher",
]
