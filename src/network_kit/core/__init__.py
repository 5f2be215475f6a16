"""Core network-kit модули."""

from .config import NetworkConfig
from .env_config import NetworkSettings, load_from_env
from .request import HTTPMethod, NetworkRequest, WireRequest
from .result import Success, Failure, Result
from .exceptions import (
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
from .classifier import classify_status
from .diagnostics import to_json_string
from .codec import Codec, PydanticCodec, DecodeError
from .resolver import RawResponse, resolve
from .transport import Transport, RequestsTransport, HttpxTransport
from .requester import NetworkRequester, is_valid_url

__all__ = [
    # Config
    "NetworkConfig",
    "NetworkSettings",
    "load_from_env",
    # Request
    "HTTPMethod",
    "NetworkRequest",
    "WireRequest",
    # Result
    "Success",
    "Failure",
    "Result",
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
    # Resolution
    "classify_status",
    "to_json_string",
    "Codec",
    "PydanticCodec",
    "DecodeError",
    "RawResponse",
    "resolve",
    # Transport
    "Transport",
    "RequestsTransport",
    "HttpxTransport",
    # Client
    "NetworkRequester",
    "is_valid_url",
]
