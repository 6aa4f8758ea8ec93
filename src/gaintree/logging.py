"""Logging utilities for gaintree.

The package logs through loguru and is silent by default: ``gaintree`` is
disabled on import and ``enable_logging()`` turns it on behind a handler that
only passes gaintree records.

Note:
    Importing this module removes loguru's default stderr handler (ID 0) so
    records are not printed twice once ``enable_logging()`` adds its own. If
    handler 0 was already removed the ``ValueError`` is suppressed.
"""

from __future__ import annotations

import contextlib
import sys
import threading
from typing import TYPE_CHECKING, ClassVar, Final, Literal

from loguru import logger

if TYPE_CHECKING:
    from types import TracebackType

    from loguru import Record

PACKAGE_NAME: Final[str] = __name__.split(".")[0]

with contextlib.suppress(ValueError):
    logger.remove(0)

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

LogFormat = Literal["short", "full"]

_FORMATS: Final[dict[str, str]] = {
    "short": (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{function}</cyan> - "
        "<level>{message}</level>"
    ),
    "full": (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level>"
    ),
}


class LoggingHandle:
    """Handle for one handler added by ``enable_logging``.

    Call ``disable()`` or use the handle as a context manager to remove the
    handler. When the last active handle is disabled the ``gaintree`` logger is
    disabled again.

    Examples:
        >>> with enable_logging(level="DEBUG"):  # doctest: +SKIP
        ...     build_tree(rows)
    """

    _active_ids: ClassVar[set[int]] = set()
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, handler_id: int) -> None:
        self.handler_id: int | None = handler_id
        with LoggingHandle._lock:
            LoggingHandle._active_ids.add(handler_id)

    def disable(self) -> None:
        """Remove this handle's handler; idempotent."""
        with LoggingHandle._lock:
            if self.handler_id is None:
                return
            LoggingHandle._active_ids.discard(self.handler_id)
            with contextlib.suppress(ValueError):
                logger.remove(self.handler_id)
            self.handler_id = None
            if not LoggingHandle._active_ids:
                logger.disable(PACKAGE_NAME)

    def __enter__(self) -> LoggingHandle:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.disable()

    @classmethod
    def get_active_handle_count(cls) -> int:
        """Return the number of handles that have not been disabled."""
        with cls._lock:
            return len(cls._active_ids)


def enable_logging(
    *,
    level: LogLevel = "DEBUG",
    log_format: LogFormat = "short",
    sink=sys.stderr,
) -> LoggingHandle:
    """Enable gaintree logging.

    Split decisions and prune collapses are logged at DEBUG, individual leaves
    at TRACE.

    Args:
        level (LogLevel): Minimum level to display. Defaults to "DEBUG".
        log_format (LogFormat): "short" shows only the function name, "full"
            shows module:function:line.
        sink: Any loguru sink. Defaults to ``sys.stderr``.

    Returns:
        LoggingHandle: Independent handle for the added handler.

    Raises:
        ValueError: If ``log_format`` is not "short" or "full".
    """
    if log_format not in _FORMATS:
        raise ValueError(f"log_format must be 'short' or 'full', got {log_format!r}")
    logger.enable(PACKAGE_NAME)
    handler_id = logger.add(
        sink,
        level=level,
        filter=_is_gaintree_record,
        format=_FORMATS[log_format],
    )
    return LoggingHandle(handler_id)


def _is_gaintree_record(record: Record) -> bool:
    name = record["name"]
    return name is not None and name.startswith(PACKAGE_NAME)
