"""
Reload watcher: watchdog observer on the config file's directory.

Each change to the config file calls Config.reload(); a failed reload keeps the previous
document. stop() cancels the subscription at shutdown.
"""

import os
from pathlib import Path
from typing import Any, Callable

import structlog
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from relay.config.accessor import Config

logger = structlog.get_logger(__name__)


class _ConfigFileHandler(FileSystemEventHandler):
    """Forward events that touch one file; editors often save via create or rename."""

    def __init__(self, path: Path, callback: Callable[[str], None]):
        super().__init__()
        self._path = path
        self._callback = callback

    def _dispatch_path(self, src: Any) -> None:
        if Path(os.fsdecode(src)).resolve() == self._path:
            self._callback(os.fsdecode(src))

    def on_modified(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._dispatch_path(event.src_path)

    def on_created(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._dispatch_path(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._dispatch_path(event.dest_path)


class ConfigWatcher:
    """Background reload of a file-backed Config."""

    def __init__(
        self,
        config: Config,
        on_reload: Callable[[Config], None] | None = None,
        observer_factory: Callable[[], Any] | None = None,
    ):
        if config.path is None:
            raise ValueError("ConfigWatcher needs a Config loaded from a file")
        self.config = config
        self.on_reload = on_reload
        self._path = config.path.resolve()
        self._observer_factory = observer_factory
        self._observer: Any = None
        self.handler = _ConfigFileHandler(self._path, self.handle_change)

    @property
    def running(self) -> bool:
        return self._observer is not None

    def handle_change(self, path: str) -> bool:
        """
        Reload after a change notification. Returns True if the new file is active.

        Runs on the observer thread, so errors are logged here and never escape:
        the observer must keep delivering events until stop().
        """
        logger.info("config_file_changed", name=path)
        try:
            reloaded = self.config.reload()
        except Exception as e:
            logger.exception("config_reload_failed", path=str(self._path), error=str(e))
            return False
        if not reloaded:
            return False
        if self.on_reload is not None:
            try:
                self.on_reload(self.config)
            except Exception as e:
                logger.exception("config_reload_callback_failed", path=str(self._path), error=str(e))
        return True

    def start(self) -> None:
        if self._observer is not None:
            return
        observer = (self._observer_factory or Observer)()
        observer.schedule(self.handler, str(self._path.parent), recursive=False)
        observer.daemon = True
        observer.start()
        self._observer = observer
        logger.info("config_watcher_started", path=str(self._path))

    def stop(self, timeout: float = 2.0) -> None:
        observer, self._observer = self._observer, None
        if observer is None:
            return
        observer.stop()
        observer.join(timeout=timeout)
        logger.info("config_watcher_stopped", path=str(self._path))

    def __enter__(self) -> "ConfigWatcher":
        self.start()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.stop()
