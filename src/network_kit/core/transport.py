# src/network_kit/core/transport.py
"""
Транспорты: выполняют сетевой обмен и отдают RawResponse.

Transport - граница, за которой живут сокеты, TLS, пул соединений и DNS.
Клиент и резолвер не знают о requests/httpx, что позволяет подменять
транспорт in-memory фейком в тестах.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from typing import AsyncIterator, Callable, Optional

import httpx
import requests
from requests.adapters import HTTPAdapter

from .request import WireRequest
from .resolver import RawResponse
from .session_manager import SessionManager
from ..utils.sanitizer import mask_url

logger = logging.getLogger("network_kit.transport")

OnDone = Callable[[Optional[RawResponse]], None]


class Transport(ABC):
    """
    Интерфейс транспорта.

    Реализация обязана:
    - submit: не блокировать вызывающего и вызвать on_done ровно один раз
      (None - транспорт не получил вообще никакого ответа)
    - asend: вернуть RawResponse (может бросить исключение)
    - уважать per-call timeout; превышение - это RawResponse.failed
    """

    @abstractmethod
    def submit(self, wire: WireRequest, timeout: float, on_done: OnDone) -> None:
        """Запустить обмен асинхронно, результат отдать в on_done."""

    @abstractmethod
    async def asend(self, wire: WireRequest, timeout: float) -> RawResponse:
        """Выполнить обмен и дождаться результата."""

    async def astream(self, wire: WireRequest, timeout: float) -> AsyncIterator[RawResponse]:
        """Single-value поток поверх asend."""
        yield await self.asend(wire, timeout)

    def close(self) -> None:
        """Освободить ресурсы."""

    async def aclose(self) -> None:
        """Async вариант close()."""
        self.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


def _deliver(future: Future, on_done: OnDone) -> None:
    """Перевести завершённый future в вызов on_done."""
    if future.cancelled():
        on_done(None)
        return
    error = future.exception()
    if error is not None:
        on_done(RawResponse.failed(error))
    else:
        on_done(future.result())


class RequestsTransport(Transport):
    """
    Транспорт на requests.

    submit выполняет запрос в ThreadPoolExecutor транспорта; asend
    выполняет тот же блокирующий вызов через loop.run_in_executor.
    Каждый поток executor-а работает со своей сессией из session_factory.

    Example:
        >>> with RequestsTransport(max_workers=2) as transport:
        ...     transport.submit(wire, 10, print)
    """

    def __init__(
        self,
        session_factory: Optional[Callable[[], requests.Session]] = None,
        max_workers: int = 4,
        verify_ssl: bool = True,
    ):
        self._sessions = SessionManager(session_factory or self._create_session)
        self._verify_ssl = verify_ssl
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="network_kit",
        )

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        # Без ретраев на уровне адаптера
        adapter = HTTPAdapter(max_retries=0)
        session.mount('http://', adapter)
        session.mount('https://', adapter)
        return session

    def send(self, wire: WireRequest, timeout: float) -> RawResponse:
        """Блокирующий обмен; ошибки requests становятся transport failure."""
        try:
            response = self._sessions.get_session().request(
                wire.method,
                wire.url,
                headers=dict(wire.headers),
                data=wire.content,
                timeout=timeout,
                verify=self._verify_ssl,
            )
        except requests.RequestException as e:
            logger.debug("Transport failure", extra={"url": mask_url(wire.url), "error": str(e)})
            return RawResponse.failed(e)
        return RawResponse.completed(response.status_code, response.content)

    def submit(self, wire: WireRequest, timeout: float, on_done: OnDone) -> None:
        future = self._executor.submit(self.send, wire, timeout)
        future.add_done_callback(lambda f: _deliver(f, on_done))

    async def asend(self, wire: WireRequest, timeout: float) -> RawResponse:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self.send, wire, timeout)

    def close(self) -> None:
        self._executor.shutdown(wait=False)
        self._sessions.close_all()


class HttpxTransport(Transport):
    """
    Транспорт на httpx.

    asend использует httpx.AsyncClient (нативный async), submit -
    httpx.Client в ThreadPoolExecutor транспорта.

    Example:
        >>> async with NetworkRequester(transport=HttpxTransport()) as requester:
        ...     result = await requester.fetch(req, User)
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        async_client: Optional[httpx.AsyncClient] = None,
        max_workers: int = 4,
        verify_ssl: bool = True,
    ):
        self._verify_ssl = verify_ssl
        self._client = client
        self._async_client = async_client
        self._owns_client = client is None
        self._owns_async_client = async_client is None
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="network_kit",
        )

    def _get_client(self) -> httpx.Client:
        """Получить или создать sync клиент."""
        if self._client is None:
            self._client = httpx.Client(verify=self._verify_ssl)
        return self._client

    def _get_async_client(self) -> httpx.AsyncClient:
        """Получить или создать async клиент."""
        if self._async_client is None:
            self._async_client = httpx.AsyncClient(verify=self._verify_ssl)
        return self._async_client

    def send(self, wire: WireRequest, timeout: float) -> RawResponse:
        try:
            response = self._get_client().request(
                wire.method,
                wire.url,
                headers=dict(wire.headers),
                content=wire.content,
                timeout=timeout,
            )
        except httpx.HTTPError as e:
            logger.debug("Transport failure", extra={"url": mask_url(wire.url), "error": str(e)})
            return RawResponse.failed(e)
        return RawResponse.completed(response.status_code, response.content)

    def submit(self, wire: WireRequest, timeout: float, on_done: OnDone) -> None:
        future = self._executor.submit(self.send, wire, timeout)
        future.add_done_callback(lambda f: _deliver(f, on_done))

    async def asend(self, wire: WireRequest, timeout: float) -> RawResponse:
        try:
            response = await self._get_async_client().request(
                wire.method,
                wire.url,
                headers=dict(wire.headers),
                content=wire.content,
                timeout=timeout,
            )
        except httpx.HTTPError as e:
            logger.debug("Transport failure", extra={"url": mask_url(wire.url), "error": str(e)})
            return RawResponse.failed(e)
        return RawResponse.completed(response.status_code, response.content)

    def close(self) -> None:
        self._executor.shutdown(wait=False)
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    async def aclose(self) -> None:
        if self._async_client is not None and self._owns_async_client:
            await self._async_client.aclose()
            self._async_client = None
        self.close()
