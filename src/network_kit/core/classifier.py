"""Status code to error kind mapping."""

from typing import Optional

from .exceptions import (
    BadRequestError,
    NetworkRequestError,
    ServerError,
    UnauthorizedError,
    UnknownError,
)


def classify_status(status: int, message: str = "") -> Optional[NetworkRequestError]:
    """
    Map an HTTP status code to an error kind.

    Ranges are checked in order: 2xx, 401, 400/402-499, 5xx, everything else.

    Args:
        status: HTTP status code
        message: Diagnostic string for the response body

    Returns:
        None for 2xx, otherwise the error with detail
        "<status> error response. <message>"

    Examples:
        >>> classify_status(204) is None
        True
        >>> classify_status(401, "{}")
        UnauthorizedError('401 error response. {}')
    """
    if 200 <= status <= 299:
        return None

    detail = f"{status} error response. {message}"

    if status == 401:
        return UnauthorizedError(detail)
    elif status == 400 or 402 <= status <= 499:
        return BadRequestError(detail)
    elif 500 <= status <= 599:
        return ServerError(detail)
    else:
        return UnknownError(detail)
