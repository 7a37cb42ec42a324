"""
Structured logging setup.

- configure_logging() once at startup (console or JSON renderer).
- All loggers print through one shared sink; redirect_output() swaps its target so
  loggers created before the switch follow it (used for the general LogFile setting).
"""

import logging
import os
import sys
import threading
from typing import IO, Any

import structlog

_configured: bool = False


class _OutputSink:
    """File-like object that forwards writes to the current target stream."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._stream: IO[str] | None = None
        self._owned = False

    @property
    def stream(self) -> IO[str]:
        # None means "whatever sys.stderr is right now" so captured stderr keeps working
        return self._stream if self._stream is not None else sys.stderr

    def set(self, stream: IO[str] | None, owned: bool = False) -> None:
        """Switch target; a previous target opened by open_log_file() is closed."""
        with self._lock:
            previous, previous_owned = self._stream, self._owned
            self._stream, self._owned = stream, owned
        if previous_owned and previous is not None and previous is not stream:
            previous.close()

    def write(self, text: str) -> int:
        with self._lock:
            return self.stream.write(text)

    def flush(self) -> None:
        with self._lock:
            self.stream.flush()


_sink = _OutputSink()


def configure_logging(log_level: str = "INFO", json_output: bool = False) -> None:
    """
    Configure structlog for the process. Idempotent; call reset_logging() to reconfigure.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
        json_output: Render JSON lines instead of the console format.
    """
    global _configured
    if _configured:
        return
    level = getattr(logging, log_level.upper(), logging.INFO)
    renderer: Any
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=_sink),
        cache_logger_on_first_use=False,
    )
    _configured = True


def reset_logging() -> None:
    """Drop structlog configuration and restore stderr output (for tests)."""
    global _configured
    _configured = False
    _sink.set(None)
    structlog.reset_defaults()


def redirect_output(stream: IO[str], owned: bool = False) -> None:
    """Send all subsequent log output to stream. owned=True closes it when output moves elsewhere."""
    configure_logging()
    _sink.set(stream, owned)


def reset_output() -> None:
    """Send log output back to stderr."""
    _sink.set(None)


def open_log_file(path: str) -> bool:
    """
    Open path for append (created with mode 0600 if missing) and redirect log output there.

    Returns:
        True when output now goes to the file; False if it could not be opened
        (a warning is logged and output stays on the previous sink).
    """
    logger = structlog.get_logger(__name__)
    try:
        fd = os.open(path, os.O_CREAT | os.O_WRONLY | os.O_APPEND, 0o600)
        stream = os.fdopen(fd, "a", encoding="utf-8")
    except OSError as e:
        logger.warning("log_file_open_failed", path=path, error=str(e))
        return False
    logger.info("log_file_opening", path=path)
    redirect_output(stream, owned=True)
    return True
