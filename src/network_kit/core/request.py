"""
Описание исходящего запроса.

NetworkRequest - immutable значение (frozen dataclass), из которого
строится WireRequest для транспорта.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .codec import Codec

logger = logging.getLogger("network_kit.request")


class HTTPMethod(str, Enum):
    """Поддерживаемые HTTP методы."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


@dataclass(frozen=True)
class WireRequest:
    """
    Запрос в том виде, в котором его отправляет транспорт.

    Args:
        method: HTTP метод строкой
        url: Проверенный URL
        headers: Заголовки
        content: Закодированное тело (или None)
    """
    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    content: Optional[bytes] = None


@dataclass(frozen=True)
class NetworkRequest:
    """
    Описание запроса.

    Args:
        url: URL строкой (валидируется клиентом, не здесь)
        http_method: HTTP метод
        headers: Заголовки (регистр ключей сохраняется)
        body: Любое значение, которое умеет кодировать Codec
        timeout: Таймаут запроса в секундах (перекрывает дефолт клиента)

    Examples:
        >>> NetworkRequest(url="https://api.example.com/users")
        >>> NetworkRequest(
        ...     url="https://api.example.com/users",
        ...     http_method=HTTPMethod.POST,
        ...     body={"name": "alice"},
        ...     timeout=5,
        ... )
    """
    url: str
    http_method: HTTPMethod = HTTPMethod.GET
    headers: Optional[Mapping[str, str]] = None
    body: Any = None
    timeout: Optional[float] = None

    def __post_init__(self):
        """Валидация и заморозка заголовков."""
        if not isinstance(self.http_method, HTTPMethod):
            object.__setattr__(self, 'http_method', HTTPMethod(str(self.http_method).upper()))
        if self.headers is not None and not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, 'headers', MappingProxyType(dict(self.headers)))
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive")

    def build_wire_request(
        self,
        codec: 'Codec',
        url: Optional[str] = None,
        default_headers: Optional[Mapping[str, str]] = None,
    ) -> WireRequest:
        """
        Построить WireRequest.

        Тело, которое кодек не смог закодировать, отправляется как
        отсутствующее.

        Args:
            codec: Кодек для тела
            url: Нормализованный URL (по умолчанию self.url)
            default_headers: Заголовки клиента; заголовки запроса важнее
        """
        headers = dict(default_headers or {})
        headers.update(self.headers or {})

        content = None
        if self.body is not None:
            content = codec.encode(self.body)
            if content is None:
                logger.warning(
                    "Request body could not be encoded, sending without body",
                    extra={"body_type": type(self.body).__name__},
                )
            elif not any(k.lower() == "content-type" for k in headers):
                headers["Content-Type"] = "application/json"

        return WireRequest(
            method=self.http_method.value,
            url=url if url is not None else self.url,
            headers=MappingProxyType(headers),
            content=content,
        )
