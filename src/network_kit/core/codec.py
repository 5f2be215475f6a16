"""
JSON codec для тел запросов и ответов.

Резолвер зависит только от интерфейса Codec; реализация по умолчанию
построена на pydantic.TypeAdapter.
"""

from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import PydanticUserError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

T = TypeVar("T")


class DecodeError(Exception):
    """
    Ошибка декодирования тела ответа в целевой тип.

    Args:
        errors: Структурированное описание (список словарей)
        target_type: Целевой тип
    """

    def __init__(self, errors: List[Dict[str, Any]], target_type: Any = None):
        self.errors = errors
        self.target_type = target_type
        super().__init__(self.describe())

    def describe(self) -> str:
        """Описание ошибки одной строкой."""
        type_name = getattr(self.target_type, "__name__", repr(self.target_type))
        return f"{{target: {type_name}, errors: {self.errors!r}}}"


class Codec(ABC):
    """Интерфейс JSON кодека."""

    @abstractmethod
    def encode(self, value: Any) -> Optional[bytes]:
        """Закодировать значение; None если значение не сериализуется."""

    @abstractmethod
    def decode(self, data: bytes, target_type: Type[T]) -> T:
        """
        Декодировать байты в target_type.

        Raises:
            DecodeError: Тело не является валидным JSON целевого типа
        """


@lru_cache(maxsize=256)
def _adapter_for(target_type: Any) -> TypeAdapter:
    return TypeAdapter(target_type)


def _get_adapter(target_type: Any) -> TypeAdapter:
    try:
        hash(target_type)
    except TypeError:
        # Unhashable target type, not cacheable
        return TypeAdapter(target_type)
    return _adapter_for(target_type)


class PydanticCodec(Codec):
    """
    Codec на pydantic v2.

    Целевым типом может быть BaseModel, dataclass, TypedDict или
    обычный тип (dict, list[int], ...).

    Example:
        >>> codec = PydanticCodec()
        >>> codec.decode(b'{"id": 1}', dict)
        {'id': 1}
    """

    def encode(self, value: Any) -> Optional[bytes]:
        if value is None:
            return None
        if isinstance(value, (bytes, bytearray)):
            return bytes(value)
        try:
            return _adapter_for(type(value)).dump_json(value)
        except (PydanticSerializationError, TypeError, ValueError):
            return None

    def decode(self, data: bytes, target_type: Type[T]) -> T:
        try:
            return _get_adapter(target_type).validate_json(data)
        except PydanticUserError as e:
            # pydantic не умеет строить схему для target_type
            raise DecodeError(
                [{"type": e.code, "loc": [], "msg": e.message}], target_type
            ) from e
        except ValidationError as e:
            errors = [
                {
                    "type": err.get("type"),
                    "loc": list(err.get("loc", ())),
                    "msg": err.get("msg"),
                }
                for err in e.errors(include_url=False)
            ]
            raise DecodeError(errors, target_type) from e
