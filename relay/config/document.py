"""
Document store: the decoded key/value tree behind every config lookup.

- Decodes JSON, YAML or TOML bytes (format picked from the file extension, TOML by default).
- Keys are case-insensitive; dotted paths walk nested tables ("irc.freenode.Nick").
- Environment variables override document values at lookup time:
  RELAY_IRC_FREENODE_NICK overrides irc.freenode.Nick ("." and "-" fold to "_").
  An empty variable is ignored and the document value stays in effect.
- Every lookup returns (value, is_set) so an explicit false/0/"" is not mistaken for unset.
"""

import copy
import json
import os
import tomllib
from pathlib import Path
from typing import Any, Iterator

import yaml

from relay.config.errors import ConfigParseError, ConfigTypeError

ENV_PREFIX = "RELAY"

# Leaf/branch values produced by the decoders
Value = bool | int | float | str | list[Any] | dict[str, Any] | None

_TRUE_STRINGS = {"1", "t", "true", "yes", "y", "on"}
_FALSE_STRINGS = {"0", "f", "false", "no", "n", "off", ""}


def detect_config_type(path: str | Path) -> str:
    """Return "json" or "yaml" based on the file extension; anything else is "toml"."""
    ext = Path(path).suffix
    if ext == ".json":
        return "json"
    if ext in (".yaml", ".yml"):
        return "yaml"
    return "toml"


def _lower_keys(value: Any) -> Any:
    """Lower-case mapping keys recursively (including mappings nested in lists)."""
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_lower_keys(v) for v in value]
    return value


def decode(data: bytes | str, fmt: str = "toml") -> dict[str, Any]:
    """
    Decode config bytes into a case-folded tree.

    Raises:
        ConfigParseError: Undecodable input, or the root is not a table/mapping.
    """
    try:
        text = data.decode("utf-8") if isinstance(data, bytes) else data
        if fmt == "json":
            tree = json.loads(text) if text.strip() else {}
        elif fmt == "yaml":
            tree = yaml.safe_load(text)
        else:
            tree = tomllib.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError, tomllib.TOMLDecodeError) as e:
        raise ConfigParseError(f"failed to parse {fmt} configuration: {e}", fmt) from e
    if tree is None:
        tree = {}
    if not isinstance(tree, dict):
        raise ConfigParseError(
            f"failed to parse {fmt} configuration: top level must be a mapping, got {type(tree).__name__}",
            fmt,
        )
    return _lower_keys(tree)


def _to_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        folded = value.strip().lower()
        if folded in _TRUE_STRINGS:
            return True
        if folded in _FALSE_STRINGS:
            return False
    raise ConfigTypeError(key, "bool", value)


def _to_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigTypeError(key, "int", value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ConfigTypeError(key, "int", value)


def _to_string(key: str, value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    raise ConfigTypeError(key, "string", value)


def _to_string_list(key: str, value: Any) -> list[str]:
    if isinstance(value, str):
        return value.split()
    if isinstance(value, list):
        return [_to_string(key, item) for item in value]
    raise ConfigTypeError(key, "string list", value)


def as_string_list_2d(value: Any) -> list[list[str]] | None:
    """value as a list of string lists, or None if it has any other shape."""
    if not isinstance(value, list):
        return None
    result: list[list[str]] = []
    for entry in value:
        if not isinstance(entry, list) or not all(isinstance(item, str) for item in entry):
            return None
        result.append(list(entry))
    return result


def _coerce_like(key: str, raw: str, template: Any) -> Any:
    """Convert an environment string to the type of the document value it replaces."""
    try:
        if isinstance(template, bool):
            return _to_bool(key, raw)
        if isinstance(template, int):
            return _to_int(key, raw)
        if isinstance(template, float):
            return float(raw)
        if isinstance(template, list):
            return raw.split()
    except (ConfigTypeError, ValueError):
        return raw
    return raw


class DocumentStore:
    """Immutable, case-insensitive view of one decoded config document plus environment overrides."""

    def __init__(self, tree: dict[str, Any] | None = None, env_prefix: str = ENV_PREFIX, fmt: str = "toml"):
        self._tree = _lower_keys(tree or {})
        self.env_prefix = env_prefix
        self.format = fmt

    @classmethod
    def load(cls, data: bytes | str, fmt: str = "toml", env_prefix: str = ENV_PREFIX) -> "DocumentStore":
        """Parse data in the given format. Raises ConfigParseError."""
        return cls(decode(data, fmt), env_prefix=env_prefix, fmt=fmt)

    def env_key(self, key: str) -> str:
        """Environment variable consulted for key, e.g. general.MediaDownloadSize -> RELAY_GENERAL_MEDIADOWNLOADSIZE."""
        name = f"{self.env_prefix}_{key}" if self.env_prefix else key
        return name.replace(".", "_").replace("-", "_").upper()

    def _env(self, key: str) -> str | None:
        """Override for key; an empty variable counts as unset."""
        return os.environ.get(self.env_key(key)) or None

    def _lookup(self, key: str) -> tuple[Any, bool]:
        node: Any = self._tree
        for part in key.lower().split("."):
            if not isinstance(node, dict) or part not in node:
                return None, False
            node = node[part]
        return node, True

    def get(self, key: str) -> tuple[Value, bool]:
        """Raw value and presence; a non-empty environment override wins and is returned as a string."""
        env_value = self._env(key)
        if env_value is not None:
            return env_value, True
        value, found = self._lookup(key)
        return copy.deepcopy(value), found

    def is_set(self, key: str) -> bool:
        return self.get(key)[1]

    def get_bool(self, key: str) -> tuple[bool, bool]:
        value, found = self.get(key)
        if not found or value is None:
            return False, found
        return _to_bool(key, value), True

    def get_int(self, key: str) -> tuple[int, bool]:
        value, found = self.get(key)
        if not found or value is None:
            return 0, found
        return _to_int(key, value), True

    def get_string(self, key: str) -> tuple[str, bool]:
        value, found = self.get(key)
        if not found or value is None:
            return "", found
        return _to_string(key, value), True

    def get_string_list(self, key: str) -> tuple[list[str], bool]:
        value, found = self.get(key)
        if not found or value is None:
            return [], found
        return _to_string_list(key, value), True

    def get_string_list_2d(self, key: str) -> tuple[list[list[str]], bool]:
        """
        List of string lists, e.g. ReplaceMessages = [["cat", "dog"], ["foo", "bar"]].

        Any other shape (scalar, flat list, non-string item) is reported as not found.
        """
        value, found = self.get(key)
        result = as_string_list_2d(value) if found else None
        if result is None:
            return [], False
        return result, True

    def keys(self) -> list[str]:
        """All leaf keys in dotted, lower-case form, in document order."""
        return list(self._iter_leaves(self._tree, ""))

    def _iter_leaves(self, node: dict[str, Any], prefix: str) -> Iterator[str]:
        for name, value in node.items():
            path = f"{prefix}.{name}" if prefix else name
            if isinstance(value, dict) and value:
                yield from self._iter_leaves(value, path)
            else:
                yield path

    def all_settings(self) -> dict[str, Any]:
        """Copy of the whole tree with environment overrides applied to every existing leaf."""
        return self._overlay(self._tree, "")

    def _overlay(self, node: dict[str, Any], prefix: str) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for name, value in node.items():
            path = f"{prefix}.{name}" if prefix else name
            if isinstance(value, dict):
                out[name] = self._overlay(value, path)
                continue
            env_value = self._env(path)
            if env_value is not None:
                out[name] = _coerce_like(path, env_value, value)
            else:
                out[name] = copy.deepcopy(value)
        return out
