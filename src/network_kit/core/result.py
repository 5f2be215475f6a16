"""Two-variant result of a resolved request."""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from .exceptions import NetworkRequestError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """
    Successfully decoded value.

    Example:
        >>> result = Success({"id": 1})
        >>> result.unwrap()
        {'id': 1}
    """

    value: T

    @property
    def is_success(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    """
    Exactly one error kind for a request.

    Example:
        >>> result = Failure(BadURLError("Invalid url"))
        >>> result.error.kind
        'bad_url'
    """

    error: NetworkRequestError

    @property
    def is_success(self) -> bool:
        return False

    def unwrap(self) -> Any:
        """Raise the carried error."""
        raise self.error


Result = Union[Success[T], Failure]
