"""Override shadow: fixed key -> value overrides in front of a real config (test doubles)."""

from types import MappingProxyType
from typing import Any, Mapping

from relay.config.accessor import ConfigAccessor
from relay.config.document import Value, as_string_list_2d
from relay.config.errors import ConfigTypeError
from relay.config.schemas import BridgeValues


class OverrideConfig:
    """
    Wraps any ConfigAccessor. Keys found in overrides are answered from the mapping
    (always reported as set); everything else is forwarded unchanged.

    Override keys are matched case-insensitively, like document keys.
    """

    def __init__(self, config: ConfigAccessor, overrides: Mapping[str, Any] | None = None):
        self.config = config
        self.overrides = MappingProxyType({k.lower(): v for k, v in (overrides or {}).items()})

    def _override(self, key: str) -> tuple[Any, bool]:
        folded = key.lower()
        if folded in self.overrides:
            return self.overrides[folded], True
        return None, False

    def typed_settings(self) -> BridgeValues:
        return self.config.typed_settings()

    def is_set(self, key: str) -> bool:
        return self._override(key)[1] or self.config.is_set(key)

    def get(self, key: str) -> tuple[Value, bool]:
        value, found = self._override(key)
        if found:
            return value, True
        return self.config.get(key)

    def get_bool(self, key: str) -> tuple[bool, bool]:
        value, found = self._override(key)
        if found:
            if not isinstance(value, bool):
                raise ConfigTypeError(key, "bool", value)
            return value, True
        return self.config.get_bool(key)

    def get_int(self, key: str) -> tuple[int, bool]:
        value, found = self._override(key)
        if found:
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigTypeError(key, "int", value)
            return value, True
        return self.config.get_int(key)

    def get_string(self, key: str) -> tuple[str, bool]:
        value, found = self._override(key)
        if found:
            if not isinstance(value, str):
                raise ConfigTypeError(key, "string", value)
            return value, True
        return self.config.get_string(key)

    def get_string_list(self, key: str) -> tuple[list[str], bool]:
        value, found = self._override(key)
        if found:
            if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
                raise ConfigTypeError(key, "string list", value)
            return list(value), True
        return self.config.get_string_list(key)

    def get_string_list_2d(self, key: str) -> tuple[list[list[str]], bool]:
        value, found = self._override(key)
        if found:
            result = as_string_list_2d(value)
            if result is None:
                return [], False
            return result, True
        return self.config.get_string_list_2d(key)

    def is_filename_blacklisted(self, filename: str) -> bool:
        return self.config.is_filename_blacklisted(filename)
