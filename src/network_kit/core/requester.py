# src/network_kit/core/requester.py
from typing import Any, AsyncIterator, Callable, Mapping, Optional, Tuple, Type, TypeVar
from urllib.parse import urlsplit

from .codec import Codec, PydanticCodec
from .config import NetworkConfig
from .exceptions import BadURLError, NoResponseError, UnknownError
from .logging import NetworkKitLogger
from .request import HTTPMethod, NetworkRequest, WireRequest
from .resolver import NO_RESPONSE_DETAIL, RawResponse, describe_failure, resolve
from .result import Failure, Result
from .transport import RequestsTransport, Transport
from ..utils.sanitizer import mask_headers, mask_url

T = TypeVar("T")

OnComplete = Callable[[Result[T]], None]

BAD_URL_DETAIL = "Invalid url"

_ALLOWED_SCHEMES = {"http", "https"}


def is_valid_url(url: str) -> bool:
    """
    Проверить, что строка - абсолютный http(s) URL.

    Examples:
        >>> is_valid_url("https://api.example.com/users?page=1")
        True
        >>> is_valid_url("not a url")
        False
    """
    if not url or any(ch.isspace() or ord(ch) < 0x20 for ch in url):
        return False
    try:
        parts = urlsplit(url)
        # Raises ValueError on a malformed port
        parts.port
    except ValueError:
        return False
    return parts.scheme.lower() in _ALLOWED_SCHEMES and bool(parts.hostname)


class _OneShot:
    """Pass the first result to the callback, drop and log the rest."""

    def __init__(self, callback: OnComplete, logger: NetworkKitLogger, url: str):
        self._callback = callback
        self._logger = logger
        self._url = url
        self._delivered = False

    def __call__(self, result: Result) -> None:
        if self._delivered:
            self._logger.error("Duplicate result dropped", url=mask_url(self._url))
            return
        self._delivered = True
        self._callback(result)


class NetworkRequester:
    """
    JSON HTTP клиент с тремя стилями вызова.

    Все стили одинаково готовят запрос (таймаут, проверка URL, сборка
    WireRequest) и прогоняют единственный ответ транспорта через resolve().
    Различаются только планированием:

    - request(): callback, никогда не блокирует вызывающего
    - publisher(): async поток из не более чем одного значения
    - fetch(): корутина, возвращающая Result

    Example:
        >>> async with NetworkRequester() as requester:
        ...     result = await requester.fetch(
        ...         NetworkRequest(url="https://api.example.com/users/1"), User
        ...     )
        ...     if result.is_success:
        ...         print(result.value.name)
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        config: Optional[NetworkConfig] = None,
        codec: Optional[Codec] = None,
    ):
        """
        Args:
            transport: Транспорт (по умолчанию RequestsTransport)
            config: NetworkConfig (по умолчанию таймаут 30 сек)
            codec: JSON кодек (по умолчанию PydanticCodec)
        """
        self._config = config or NetworkConfig()
        self._codec = codec or PydanticCodec()
        self._owns_transport = transport is None
        self._transport = transport or RequestsTransport(
            max_workers=self._config.max_workers,
            verify_ssl=self._config.verify_ssl,
        )
        self._logger = NetworkKitLogger(self._config.logging, name="network_kit.requester")

    # ==================== Properties ====================

    @property
    def request_timeout(self) -> int:
        """Таймаут по умолчанию (сек)."""
        return self._config.request_timeout

    @property
    def config(self) -> NetworkConfig:
        return self._config

    @property
    def transport(self) -> Transport:
        return self._transport

    # ==================== Общая подготовка ====================

    def _effective_timeout(self, req: NetworkRequest) -> float:
        if req.timeout is not None:
            return req.timeout
        return self._config.request_timeout

    def _prepare(self, req: NetworkRequest) -> Tuple[WireRequest, float]:
        """
        Таймаут, проверка URL и сборка WireRequest.

        Raises:
            BadURLError: URL некорректен; транспорт не вызывается
        """
        timeout = self._effective_timeout(req)

        if not is_valid_url(req.url):
            raise BadURLError(BAD_URL_DETAIL)

        wire = req.build_wire_request(self._codec, default_headers=self._config.headers)

        self._logger.debug(
            "Request started",
            method=wire.method,
            url=mask_url(wire.url),
            headers=mask_headers(wire.headers),
            timeout=timeout,
            has_body=wire.content is not None,
        )
        return wire, timeout

    def _resolve(self, wire: WireRequest, outcome: RawResponse, target_type: Type[T]) -> Result[T]:
        result = resolve(outcome, target_type, self._codec)

        if isinstance(result, Failure):
            self._logger.warning(
                "Request failed",
                method=wire.method,
                url=mask_url(wire.url),
                status_code=outcome.status,
                error_kind=result.error.kind,
            )
        else:
            self._logger.info(
                "Request resolved",
                method=wire.method,
                url=mask_url(wire.url),
                status_code=outcome.status,
            )
        return result

    # ==================== Callback ====================

    def request(self, req: NetworkRequest, target_type: Type[T], on_complete: OnComplete) -> None:
        """
        Отправить запрос; on_complete получит Result ровно один раз.

        Не блокирует: callback вызывается из потока транспорта (или сразу,
        если URL некорректен).

        Args:
            req: Описание запроса
            target_type: Тип, в который декодируется тело
            on_complete: Callback(Result)
        """
        deliver = _OneShot(on_complete, self._logger, req.url)

        try:
            wire, timeout = self._prepare(req)
        except BadURLError as e:
            self._logger.warning("Invalid url", url=mask_url(req.url))
            deliver(Failure(e))
            return

        def on_done(outcome: Optional[RawResponse]) -> None:
            if outcome is None:
                deliver(Failure(NoResponseError(NO_RESPONSE_DETAIL)))
                return
            # on_done может выполняться в done-callback executor-а,
            # где исключение потерялось бы вместе с результатом
            try:
                result = self._resolve(wire, outcome, target_type)
            except Exception as e:
                self._logger.error(
                    "Resolution raised",
                    method=wire.method,
                    url=mask_url(wire.url),
                    error=describe_failure(e),
                )
                result = Failure(UnknownError(describe_failure(e)))
            deliver(result)

        try:
            self._transport.submit(wire, timeout, on_done)
        except Exception as e:
            deliver(Failure(UnknownError(describe_failure(e))))

    # ==================== Stream ====================

    async def publisher(self, req: NetworkRequest, target_type: Type[T]) -> AsyncIterator[T]:
        """
        Single-value async поток.

        - успех: ровно одно значение
        - ошибка запроса: поток завершается исключением NetworkRequestError
        - некорректный URL: поток завершается пустым, без ошибки. Это
          расходится с request()/fetch(), которые отдают BadURLError.

        Example:
            >>> async for user in requester.publisher(req, User):
            ...     print(user.name)
        """
        try:
            wire, timeout = self._prepare(req)
        except BadURLError:
            self._logger.warning("Invalid url, completing stream empty", url=mask_url(req.url))
            return

        stream = self._transport.astream(wire, timeout)
        try:
            outcome = await stream.__anext__()
        except StopAsyncIteration:
            outcome = RawResponse()
        except Exception as e:
            self._logger.warning(
                "Transport raised",
                method=wire.method,
                url=mask_url(wire.url),
                error=describe_failure(e),
            )
            raise UnknownError(describe_failure(e)) from e
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()

        result = self._resolve(wire, outcome, target_type)
        if isinstance(result, Failure):
            raise result.error
        yield result.value

    # ==================== Direct await ====================

    async def fetch(self, req: NetworkRequest, target_type: Type[T]) -> Result[T]:
        """
        Выполнить запрос и вернуть Result.

        Исключения транспорта не пробрасываются: они становятся
        Failure(UnknownError).
        """
        try:
            wire, timeout = self._prepare(req)
        except BadURLError as e:
            self._logger.warning("Invalid url", url=mask_url(req.url))
            return Failure(e)

        try:
            outcome = await self._transport.asend(wire, timeout)
        except Exception as e:
            outcome = RawResponse.failed(e)

        if outcome is None:
            outcome = RawResponse()
        return self._resolve(wire, outcome, target_type)

    # ==================== Удобные методы ====================

    async def get(self, url: str, target_type: Type[T], **kwargs: Any) -> Result[T]:
        """GET запрос."""
        return await self._fetch_method(HTTPMethod.GET, url, target_type, **kwargs)

    async def post(self, url: str, target_type: Type[T], **kwargs: Any) -> Result[T]:
        """POST запрос."""
        return await self._fetch_method(HTTPMethod.POST, url, target_type, **kwargs)

    async def put(self, url: str, target_type: Type[T], **kwargs: Any) -> Result[T]:
        """PUT запрос."""
        return await self._fetch_method(HTTPMethod.PUT, url, target_type, **kwargs)

    async def delete(self, url: str, target_type: Type[T], **kwargs: Any) -> Result[T]:
        """DELETE запрос."""
        return await self._fetch_method(HTTPMethod.DELETE, url, target_type, **kwargs)

    async def _fetch_method(
        self,
        method: HTTPMethod,
        url: str,
        target_type: Type[T],
        headers: Optional[Mapping[str, str]] = None,
        body: Any = None,
        timeout: Optional[float] = None,
    ) -> Result[T]:
        req = NetworkRequest(url=url, http_method=method, headers=headers, body=body, timeout=timeout)
        return await self.fetch(req, target_type)

    # ==================== Жизненный цикл ====================

    def close(self) -> None:
        """Закрыть свой транспорт и логгер. Переданный транспорт не трогаем."""
        if self._owns_transport:
            self._transport.close()
        self._logger.close()

    async def aclose(self) -> None:
        if self._owns_transport:
            await self._transport.aclose()
        self._logger.close()

    def __enter__(self) -> "NetworkRequester":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    async def __aenter__(self) -> "NetworkRequester":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
