"""Errors raised by the configuration subsystem."""

from typing import Any


class ConfigError(Exception):
    """Base class for configuration errors."""


class ConfigParseError(ConfigError):
    """Config bytes could not be decoded in the detected format."""

    def __init__(self, message: str, fmt: str = "toml"):
        super().__init__(message)
        self.format = fmt


class ProjectionError(ConfigError):
    """Decoded document does not fit the typed settings schema."""


class ConfigTypeError(ConfigError, TypeError):
    """A typed getter found a value of an incompatible shape."""

    def __init__(self, key: str, expected: str, value: Any):
        super().__init__(f"config key {key!r}: expected {expected}, got {type(value).__name__}")
        self.key = key
        self.expected = expected
        self.value = value
