"""
Response resolution.

Turns one raw transport outcome into a Result: a decoded value of the
caller's target type or exactly one NetworkRequestError. Pure and
synchronous; every invocation style of NetworkRequester feeds its
outcome through resolve().
"""

from dataclasses import dataclass
from typing import Any, Optional, Type, TypeVar

from .classifier import classify_status
from .codec import Codec, DecodeError, PydanticCodec
from .diagnostics import to_json_string
from .exceptions import (
    InvalidJSONError,
    NoResponseError,
    UnableToParseDataError,
    UnknownError,
)
from .result import Failure, Result, Success

T = TypeVar("T")

NO_RESPONSE_DETAIL = "Unable to handle response. Did not receive response."
NO_DATA_DETAIL = "Data is nil"

_ESCAPE_CHARS = str.maketrans("", "", "\\\"")

_default_codec = PydanticCodec()


@dataclass(frozen=True)
class RawResponse:
    """
    Raw outcome of one transport exchange.

    Either status and payload (the exchange completed) or
    transport_failure (it did not), never both.
    """

    status: Optional[int] = None
    payload: Optional[bytes] = None
    transport_failure: Optional[BaseException] = None

    @classmethod
    def completed(cls, status: int, payload: Optional[bytes] = b"") -> "RawResponse":
        return cls(status=status, payload=payload)

    @classmethod
    def failed(cls, error: BaseException) -> "RawResponse":
        return cls(transport_failure=error)


def describe_failure(error: BaseException) -> str:
    """Human-readable transport failure, never empty."""
    return str(error) or error.__class__.__name__


def resolve(
    outcome: RawResponse,
    target_type: Type[T],
    codec: Optional[Codec] = None,
) -> Result[T]:
    """
    Resolve a raw outcome into a Result.

    Order:
        1. transport failure -> UnknownError
        2. no status -> NoResponseError
        3. no payload at all -> UnableToParseDataError
        4. non-2xx status -> status error, body is never decoded
        5. decode -> Success, or InvalidJSONError

    Args:
        outcome: Raw transport outcome
        target_type: Type to decode the body into
        codec: JSON codec (PydanticCodec by default)

    Example:
        >>> resolve(RawResponse.completed(200, b'{"id": 1}'), dict)
        Success(value={'id': 1})
    """
    if outcome.transport_failure is not None:
        return Failure(UnknownError(describe_failure(outcome.transport_failure)))

    if outcome.status is None:
        return Failure(NoResponseError(NO_RESPONSE_DETAIL))

    if outcome.payload is None:
        return Failure(UnableToParseDataError(NO_DATA_DETAIL))

    diagnostic = to_json_string(outcome.payload)

    status_error = classify_status(outcome.status, diagnostic)
    if status_error is not None:
        return Failure(status_error)

    codec = codec or _default_codec
    try:
        value: Any = codec.decode(outcome.payload, target_type)
    except DecodeError as e:
        description = e.describe().translate(_ESCAPE_CHARS)
        return Failure(InvalidJSONError(f"{description} Input:\n{diagnostic}"))

    return Success(value)
