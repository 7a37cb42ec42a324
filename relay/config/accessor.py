"""
Thread-safe config accessor: the only surface bridges and the gateway read settings from.

The (document store, blacklist) pair is held in one immutable state object. Readers take
the lock just long enough to grab the current state; reload() parses and compiles outside
the lock and swaps the state under it, so readers never see a store paired with another
document's blacklist.

The typed snapshot (typed_settings()) is NOT rebuilt by reload(): it reflects the file as
it was at bootstrap. Use the get_* methods for values that must follow reloads.
"""

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog

from relay.config.blacklist import MatcherSet, compile_blacklist, matches
from relay.config.document import DocumentStore, Value
from relay.config.errors import ConfigParseError
from relay.config.schemas import BridgeValues

logger = structlog.get_logger(__name__)


@runtime_checkable
class ConfigAccessor(Protocol):
    """Read-only lookups shared by Config and test doubles (OverrideConfig)."""

    def typed_settings(self) -> BridgeValues: ...

    def is_set(self, key: str) -> bool: ...

    def get(self, key: str) -> tuple[Value, bool]: ...

    def get_bool(self, key: str) -> tuple[bool, bool]: ...

    def get_int(self, key: str) -> tuple[int, bool]: ...

    def get_string(self, key: str) -> tuple[str, bool]: ...

    def get_string_list(self, key: str) -> tuple[list[str], bool]: ...

    def get_string_list_2d(self, key: str) -> tuple[list[list[str]], bool]: ...

    def is_filename_blacklisted(self, filename: str) -> bool: ...


@dataclass(frozen=True)
class _State:
    store: DocumentStore
    blacklist: MatcherSet


class Config:
    """Live configuration: document store + compiled blacklist + bootstrap snapshot."""

    def __init__(self, store: DocumentStore, values: BridgeValues, path: str | Path | None = None):
        self._lock = threading.Lock()
        self._state = _State(store, compile_blacklist(store))
        self._values = values
        self.path = Path(path) if path is not None else None

    def _current(self) -> _State:
        with self._lock:
            return self._state

    def document(self) -> DocumentStore:
        """Current document store (replaced wholesale on reload)."""
        return self._current().store

    def typed_settings(self) -> BridgeValues:
        """Snapshot projected at bootstrap; may lag behind the file after a reload."""
        return self._values

    def is_set(self, key: str) -> bool:
        return self._current().store.is_set(key)

    def get(self, key: str) -> tuple[Value, bool]:
        return self._current().store.get(key)

    def get_bool(self, key: str) -> tuple[bool, bool]:
        return self._current().store.get_bool(key)

    def get_int(self, key: str) -> tuple[int, bool]:
        return self._current().store.get_int(key)

    def get_string(self, key: str) -> tuple[str, bool]:
        return self._current().store.get_string(key)

    def get_string_list(self, key: str) -> tuple[list[str], bool]:
        return self._current().store.get_string_list(key)

    def get_string_list_2d(self, key: str) -> tuple[list[list[str]], bool]:
        return self._current().store.get_string_list_2d(key)

    def is_filename_blacklisted(self, filename: str) -> bool:
        """
        True if filename matches general.MediaDownloadBlackList. Used to drop
        potentially harmful files (e.g. .html with XSS) before they are served over HTTP.
        """
        return matches(self._current().blacklist, filename)

    def blacklist_patterns(self) -> list[str]:
        """Patterns that compiled and are in effect; invalid entries are not included."""
        return [matcher.pattern for matcher in self._current().blacklist]

    def reload(self, data: bytes | str | None = None) -> bool:
        """
        Re-parse the config (from data, or re-read self.path) and swap it in.

        On read or parse failure the error is logged and the previous document stays in place.

        Returns:
            True if the new document is now active.
        """
        current = self._current().store
        if data is None:
            if self.path is None:
                raise ValueError("reload() without data needs a config path")
            try:
                data = self.path.read_bytes()
            except OSError as e:
                logger.error("config_reload_failed", path=str(self.path), error=str(e))
                return False
        try:
            store = DocumentStore.load(data, current.format, env_prefix=current.env_prefix)
        except ConfigParseError as e:
            logger.error("config_reload_failed", path=str(self.path), error=str(e))
            return False
        blacklist = compile_blacklist(store)
        with self._lock:
            self._state = _State(store, blacklist)
        logger.info("config_reloaded", path=str(self.path), blacklist=len(blacklist))
        return True
