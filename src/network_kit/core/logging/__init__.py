"""
Logging for network-kit.

Example:
    >>> from network_kit.core.logging import LoggingConfig
    >>> config = NetworkConfig.create(logging=LoggingConfig.create(level="DEBUG", format="json"))
    >>> requester = NetworkRequester(config=config)
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import NetworkKitLogger, ExtraFieldsFilter
from .formatters import JSONFormatter, TextFormatter, get_formatter
from .handlers import create_console_handler, create_file_handler

__all__ = [
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    "NetworkKitLogger",
    "ExtraFieldsFilter",
    "JSONFormatter",
    "TextFormatter",
    "get_formatter",
    "create_console_handler",
    "create_file_handler",
]
