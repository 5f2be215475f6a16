"""
Logger wrapper for network-kit.

Keyword arguments become structured extra fields; values are masked
before they reach any handler.
"""

import logging
from typing import Any, Dict, Optional

from .config import LoggingConfig, LogLevel
from .formatters import get_formatter
from .handlers import create_console_handler, create_file_handler
from ...utils.sanitizer import mask_sensitive_data


class ExtraFieldsFilter(logging.Filter):
    """Adds static fields (service name, environment...) to every record."""

    def __init__(self, fields: Dict[str, Any]):
        super().__init__()
        self.fields = dict(fields)

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.fields.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


class NetworkKitLogger:
    """
    Structured logger.

    With a LoggingConfig the named logger gets its own handlers and stops
    propagating. Without one the logger is left as the application
    configured it (by default only the package NullHandler).

    Example:
        >>> logger = NetworkKitLogger(LoggingConfig.create(level="DEBUG"))
        >>> logger.info("Request resolved", method="GET", outcome="success")
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = "network_kit"):
        self.config = config
        self.name = name
        self._closed = False
        self._logger = logging.getLogger(name)

        if config is None:
            return

        level = self._get_level(config.level)
        self._logger.setLevel(level)
        self._logger.propagate = False
        self._logger.handlers.clear()

        formatter = get_formatter(config.format.value)

        if config.enable_console:
            self._logger.addHandler(create_console_handler(level, formatter))

        if config.enable_file and config.file_path:
            self._logger.addHandler(create_file_handler(
                file_path=config.file_path,
                level=level,
                formatter=formatter,
                max_bytes=config.max_bytes,
                backup_count=config.backup_count,
            ))

        if config.extra_fields:
            extra_filter = ExtraFieldsFilter(config.extra_fields)
            for handler in self._logger.handlers:
                handler.addFilter(extra_filter)

    def _get_level(self, level: LogLevel) -> int:
        return getattr(logging, level.value)

    def _log(self, level: int, message: str, kwargs: Dict[str, Any]) -> None:
        self._logger.log(level, message, extra=mask_sensitive_data(kwargs))

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def close(self) -> None:
        """
        Flush and close configured handlers. Idempotent.

        Does nothing for a logger that was not configured here.
        """
        if self._closed or self.config is None:
            return

        for handler in self._logger.handlers[:]:
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)

        # Hand the logger back to the application's configuration
        self._logger.setLevel(logging.NOTSET)
        self._logger.propagate = True
        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
