"""
Конфигурация NetworkRequester.

Конфиг immutable (frozen dataclass): он читается каждым запросом и
никогда не меняется во время его выполнения.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, TYPE_CHECKING

from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from .logging import LoggingConfig

DEFAULT_REQUEST_TIMEOUT = 30


def _freeze_dict(d: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    """Convert dict to immutable MappingProxyType."""
    if d is None:
        return MappingProxyType({})
    return MappingProxyType(dict(d))


@dataclass(frozen=True)
class NetworkConfig:
    """
    Главная конфигурация клиента.

    Args:
        request_timeout: Таймаут по умолчанию (сек), если у запроса нет своего
        headers: Дефолтные заголовки; заголовки запроса их перекрывают
        max_workers: Размер пула потоков sync транспортов
        verify_ssl: Проверять SSL сертификаты
        logging: Конфигурация логирования (None = логгер не настраивается)

    Examples:
        >>> NetworkConfig()
        >>> NetworkConfig.create(request_timeout=60, headers={"Accept": "application/json"})
    """
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    max_workers: int = 4
    verify_ssl: bool = True
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Валидация и заморозка заголовков."""
        if isinstance(self.request_timeout, bool) or not isinstance(self.request_timeout, int):
            raise ConfigurationError("request_timeout must be an integer number of seconds")
        if self.request_timeout <= 0:
            raise ConfigurationError("request_timeout must be positive")
        if self.max_workers <= 0:
            raise ConfigurationError("max_workers must be positive")
        if not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, 'headers', _freeze_dict(self.headers))

    @classmethod
    def create(
        cls,
        request_timeout: int = DEFAULT_REQUEST_TIMEOUT,
        headers: Optional[Dict[str, str]] = None,
        max_workers: int = 4,
        verify_ssl: bool = True,
        logging: Optional['LoggingConfig'] = None,
    ) -> "NetworkConfig":
        """Удобная фабрика с plain-значениями."""
        return cls(
            request_timeout=request_timeout,
            headers=_freeze_dict(headers),
            max_workers=max_workers,
            verify_ssl=verify_ssl,
            logging=logging,
        )
