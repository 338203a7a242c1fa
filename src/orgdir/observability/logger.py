"""
Structured logger for the directory.

``get_logger(name)`` returns a thin wrapper over a stdlib logger under the
``orgdir`` namespace. Keyword arguments become record attributes, and the
current operation scope (operation, person id, correlation id) is attached
to every record.
"""

import logging
import time
from typing import Any, Dict, Optional

from orgdir.core.config import Settings, get_settings

from .context import current_scope
from .formatters import DirectoryFormatter

ROOT_LOGGER_NAME = "orgdir"

# attributes every LogRecord already has; ``extra`` may not overwrite them
_RESERVED_KEYS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None))
) | {"message", "asctime"}


def configure_logging(settings: Optional[Settings] = None, force: bool = False) -> logging.Logger:
    """
    Attach the directory handlers to the ``orgdir`` logger.

    Runs once per process unless ``force`` is given. Records do not
    propagate to the root logger.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if root.handlers and not force:
        return root

    config = settings or get_settings()
    root.handlers.clear()

    console = logging.StreamHandler()
    console.setFormatter(DirectoryFormatter(structured=config.LOG_STRUCTURED))
    root.addHandler(console)

    if config.LOG_TO_FILE:
        config.LOGS_DIRECTORY.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(config.LOGS_DIRECTORY / f"{config.APP_NAME}.log")
        file_handler.setFormatter(DirectoryFormatter(structured=True))
        root.addHandler(file_handler)

    root.setLevel(config.LOG_LEVEL)
    root.propagate = False
    return root


class StructuredLogger:
    """
    Logger whose keyword arguments become structured fields.

    ``logger.info("renamed %s", pid, person_id=pid)`` keeps the stdlib
    message formatting and adds ``person_id`` to the record.
    """

    def __init__(self, name: str) -> None:
        configure_logging()
        self.name = name
        self.logger = logging.getLogger(name)

    def debug(self, message: str, *args: Any, **fields: Any) -> None:
        self._log(logging.DEBUG, message, *args, **fields)

    def info(self, message: str, *args: Any, **fields: Any) -> None:
        self._log(logging.INFO, message, *args, **fields)

    def warning(self, message: str, *args: Any, **fields: Any) -> None:
        self._log(logging.WARNING, message, *args, **fields)

    def error(self, message: str, *args: Any, **fields: Any) -> None:
        self._log(logging.ERROR, message, *args, **fields)

    def _log(
        self, level: int, message: str, *args: Any, exc_info: Any = None, **fields: Any
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return

        extra: Dict[str, Any] = {}
        scope = current_scope()
        if scope is not None:
            extra.update(scope.log_fields())
        extra.update(
            (key, value) for key, value in fields.items() if key not in _RESERVED_KEYS
        )
        self.logger.log(level, message, *args, exc_info=exc_info, extra=extra or None)

    def log_error(self, error: Exception, operation: Optional[str] = None, **fields: Any) -> None:
        """Log ``error`` at ERROR with its directory error code, if it has one."""
        error_code = getattr(error, "error_code", None)
        if error_code is not None:
            fields.setdefault("error_code", error_code)
        if operation is not None:
            fields.setdefault("operation", operation)
        self._log(
            logging.ERROR,
            "%s failed: %s",
            operation or "operation",
            error,
            exc_info=error,
            **fields,
        )

    def timed_operation(self, operation: str, **fields: Any) -> "TimedOperation":
        return TimedOperation(self, operation, **fields)


class TimedOperation:
    """
    Time a block and log its outcome.

    Fields added to ``fields`` inside the block (person_id, counts, ...) are
    included in the closing record.
    """

    def __init__(self, logger: StructuredLogger, operation: str, **fields: Any) -> None:
        self.logger = logger
        self.operation = operation
        self.fields: Dict[str, Any] = fields
        self.duration_ms: Optional[float] = None
        self._started: Optional[float] = None

    def __enter__(self) -> "TimedOperation":
        self._started = time.perf_counter()
        self.logger.debug("Starting %s", self.operation, operation=self.operation, **self.fields)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._started is None:
            return
        self.duration_ms = (time.perf_counter() - self._started) * 1000
        outcome = "ok" if exc_type is None else "failed"

        self.logger.info(
            "%s %s",
            self.operation,
            "completed" if exc_type is None else "failed",
            operation=self.operation,
            outcome=outcome,
            duration_ms=self.duration_ms,
            **self.fields,
        )
        if exc_val is not None:
            self.logger.log_error(exc_val, operation=self.operation, **self.fields)


def get_logger(name: str) -> StructuredLogger:
    return StructuredLogger(name)
