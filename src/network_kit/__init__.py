"""network-kit - JSON HTTP requests resolved into typed results."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.requester import NetworkRequester
from .core.config import NetworkConfig
from .core.env_config import load_from_env
from .core.request import HTTPMethod, NetworkRequest
from .core.result import Success, Failure, Result
from .core.resolver import RawResponse, resolve
from .core.transport import Transport, RequestsTransport, HttpxTransport
from .core.codec import Codec, PydanticCodec
from .core.exceptions import (
    NetworkRequestError,
    BadURLError,
    BadRequestError,
    UnauthorizedError,
    ServerError,
    NoResponseError,
    UnableToParseDataError,
    InvalidJSONError,
    UnknownError,
    ApiError,
    ConfigurationError,
)
from .core.logging import LoggingConfig

# Users can configure logging themselves using logging.getLogger('network_kit')
logging.getLogger('network_kit').addHandler(logging.NullHandler())

try:
    __version__ = version("network-kit")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__license__ = "MIT"

__all__ = [
    # Core
    "NetworkRequester",
    "NetworkRequest",
    "HTTPMethod",

    # Config
    "NetworkConfig",
    "LoggingConfig",
    "load_from_env",

    # Result
    "Success",
    "Failure",
    "Result",
    "RawResponse",
    "resolve",

    # Collaborators
    "Transport",
    "RequestsTransport",
    "HttpxTransport",
    "Codec",
    "PydanticCodec",

    # Errors
    "NetworkRequestError",
    "BadURLError",
    "BadRequestError",
    "UnauthorizedError",
    "ServerError",
    "NoResponseError",
    "UnableToParseDataError",
    "InvalidJSONError",
    "UnknownError",
    "ApiError",
    "ConfigurationError",

    # Version
    "__version__",
]
