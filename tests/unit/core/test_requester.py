"""
Tests for NetworkRequester: callback, stream and direct-await styles.
"""

import logging
import threading

import pytest
import requests
import responses
from pydantic import BaseModel

from network_kit.core.codec import PydanticCodec
from network_kit.core.config import NetworkConfig
from network_kit.core.exceptions import (
    BadRequestError,
    BadURLError,
    InvalidJSONError,
    NoResponseError,
    ServerError,
    UnauthorizedError,
    UnknownError,
)
from network_kit.core.request import HTTPMethod, NetworkRequest
from network_kit.core.requester import NetworkRequester, is_valid_url
from network_kit.core.resolver import RawResponse
from network_kit.core.result import Failure, Success
from network_kit.core.transport import RequestsTransport

URL = "https://api.example.com/users/1"


class User(BaseModel):
    id: int
    name: str


class Opaque:
    """No pydantic schema can be generated for this type."""


async def collect(stream):
    return [item async for item in stream]


class TestIsValidUrl:
    """URL validation shared by all styles."""

    @pytest.mark.parametrize("url", [
        "https://api.example.com",
        "http://localhost:8080/path?q=1",
        "https://127.0.0.1/users",
    ])
    def test_valid(self, url):
        assert is_valid_url(url)

    @pytest.mark.parametrize("url", [
        "",
        "not a url",
        "api.example.com/users",
        "ftp://files.example.com",
        "https://",
        "https://api.example.com:notaport/",
        "https://api.example.com/with space",
    ])
    def test_invalid(self, url):
        assert not is_valid_url(url)


class TestInit:
    """Construction and defaults."""

    def test_default_timeout(self, fake_transport):
        requester = NetworkRequester(transport=fake_transport())
        assert requester.request_timeout == 30

    def test_configured_timeout(self, fake_transport, config):
        requester = NetworkRequester(transport=fake_transport(), config=config)
        assert requester.request_timeout == 10

    def test_default_transport(self):
        with NetworkRequester() as requester:
            assert isinstance(requester.transport, RequestsTransport)

    def test_passed_transport_not_closed(self, fake_transport):
        transport = fake_transport()
        with NetworkRequester(transport=transport):
            pass
        assert transport.closed is False


class TestCallbackStyle:
    """request(): result delivered to a callback."""

    def test_success(self, make_requester):
        requester, _ = make_requester(RawResponse.completed(200, b'{"id":1,"name":"a"}'))
        results = []
        requester.request(NetworkRequest(url=URL), User, results.append)
        assert results == [Success(User(id=1, name="a"))]

    def test_bad_url_never_reaches_transport(self, make_requester):
        requester, transport = make_requester(RawResponse.completed(200, b"{}"))
        results = []
        requester.request(NetworkRequest(url="not a url"), User, results.append)
        assert results == [Failure(BadURLError("Invalid url"))]
        assert transport.calls == []

    def test_no_response(self, make_requester):
        requester, _ = make_requester(no_response=True)
        results = []
        requester.request(NetworkRequest(url=URL), User, results.append)
        assert len(results) == 1
        assert isinstance(results[0].error, NoResponseError)

    def test_transport_failure_is_unknown(self, make_requester):
        requester, _ = make_requester(RawResponse.failed(requests.exceptions.Timeout("timed out")))
        results = []
        requester.request(NetworkRequest(url=URL), User, results.append)
        assert results == [Failure(UnknownError("timed out"))]

    def test_submit_raising_is_unknown(self, make_requester):
        requester, _ = make_requester(raises=RuntimeError("executor is shut down"))
        results = []
        requester.request(NetworkRequest(url=URL), User, results.append)
        assert results == [Failure(UnknownError("executor is shut down"))]

    def test_single_delivery(self, make_requester, caplog):
        requester, _ = make_requester(RawResponse.completed(200, b'{"id":1,"name":"a"}'), repeat=3)
        results = []
        with caplog.at_level(logging.ERROR, logger="network_kit"):
            requester.request(NetworkRequest(url=URL), User, results.append)
        assert len(results) == 1
        assert any("Duplicate result dropped" in r.getMessage() for r in caplog.records)

    def test_unauthorized(self, make_requester):
        requester, _ = make_requester(RawResponse.completed(401, b""))
        results = []
        requester.request(NetworkRequest(url=URL), User, results.append)
        assert isinstance(results[0].error, UnauthorizedError)


class TestStreamStyle:
    """publisher(): single-value async stream."""

    @pytest.mark.asyncio
    async def test_success_emits_one_value(self, make_requester):
        requester, _ = make_requester(RawResponse.completed(200, b'{"id":1,"name":"a"}'))
        assert await collect(requester.publisher(NetworkRequest(url=URL), User)) == [User(id=1, name="a")]

    @pytest.mark.asyncio
    async def test_bad_url_completes_empty(self, make_requester, caplog):
        requester, transport = make_requester(RawResponse.completed(200, b"{}"))
        with caplog.at_level(logging.WARNING, logger="network_kit"):
            items = await collect(requester.publisher(NetworkRequest(url="not a url"), User))
        assert items == []
        assert transport.calls == []
        assert any("completing stream empty" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_error_status_raises(self, make_requester):
        requester, _ = make_requester(RawResponse.completed(404, b'{"msg":"not found"}'))
        with pytest.raises(BadRequestError) as exc_info:
            await collect(requester.publisher(NetworkRequest(url=URL), User))
        assert exc_info.value.detail.startswith("404 error response. ")

    @pytest.mark.asyncio
    async def test_transport_exception_raises_unknown(self, make_requester):
        requester, _ = make_requester(raises=OSError("network unreachable"))
        with pytest.raises(UnknownError, match="network unreachable"):
            await collect(requester.publisher(NetworkRequest(url=URL), User))

    @pytest.mark.asyncio
    async def test_transport_failure_raises_unknown(self, make_requester):
        requester, _ = make_requester(RawResponse.failed(requests.exceptions.ConnectTimeout("slow")))
        with pytest.raises(UnknownError):
            await collect(requester.publisher(NetworkRequest(url=URL), User))

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self, make_requester):
        requester, _ = make_requester(RawResponse.completed(200, b"not json"))
        with pytest.raises(InvalidJSONError):
            await collect(requester.publisher(NetworkRequest(url=URL), User))


class TestAwaitStyle:
    """fetch(): awaited Result."""

    @pytest.mark.asyncio
    async def test_success(self, make_requester):
        requester, _ = make_requester(RawResponse.completed(200, b'{"id":1,"name":"a"}'))
        result = await requester.fetch(NetworkRequest(url=URL), User)
        assert result == Success(User(id=1, name="a"))

    @pytest.mark.asyncio
    async def test_bad_url(self, make_requester):
        requester, transport = make_requester(RawResponse.completed(200, b"{}"))
        result = await requester.fetch(NetworkRequest(url="not a url"), User)
        assert result == Failure(BadURLError("Invalid url"))
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_raised_exception_becomes_unknown(self, make_requester):
        requester, _ = make_requester(raises=TimeoutError("deadline exceeded"))
        result = await requester.fetch(NetworkRequest(url=URL), User)
        assert result == Failure(UnknownError("deadline exceeded"))

    @pytest.mark.asyncio
    async def test_server_error(self, make_requester):
        requester, _ = make_requester(RawResponse.completed(502, b"<html>bad gateway</html>"))
        result = await requester.fetch(NetworkRequest(url=URL), User)
        assert isinstance(result.error, ServerError)
        assert "bad gateway" in result.error.detail

    @pytest.mark.asyncio
    async def test_unwrap_raises_error(self, make_requester):
        requester, _ = make_requester(RawResponse.completed(400, b"{}"))
        result = await requester.fetch(NetworkRequest(url=URL), User)
        with pytest.raises(BadRequestError):
            result.unwrap()

    @pytest.mark.asyncio
    async def test_target_without_schema_is_failure(self, make_requester):
        requester, _ = make_requester(RawResponse.completed(200, b'{"x": 1}'))
        result = await requester.fetch(NetworkRequest(url=URL), Opaque)
        assert isinstance(result.error, InvalidJSONError)


class TestTimeoutAndWire:
    """Shared preparation: timeout and wire request."""

    @pytest.mark.asyncio
    async def test_default_timeout_used(self, make_requester):
        requester, transport = make_requester(RawResponse.completed(200, b"{}"))
        await requester.fetch(NetworkRequest(url=URL), dict)
        assert transport.calls[0][1] == 30

    @pytest.mark.asyncio
    async def test_config_timeout_used(self, make_requester):
        requester, transport = make_requester(
            RawResponse.completed(200, b"{}"), config=NetworkConfig.create(request_timeout=7)
        )
        await requester.fetch(NetworkRequest(url=URL), dict)
        assert transport.calls[0][1] == 7

    def test_request_timeout_overrides(self, make_requester):
        requester, transport = make_requester(RawResponse.completed(200, b"{}"))
        requester.request(NetworkRequest(url=URL, timeout=2.5), dict, lambda result: None)
        assert transport.calls[0][1] == 2.5

    @pytest.mark.asyncio
    async def test_wire_request(self, make_requester):
        requester, transport = make_requester(
            RawResponse.completed(201, b'{"id": 2, "name": "b"}'),
            config=NetworkConfig.create(headers={"Accept": "application/json"}),
        )
        req = NetworkRequest(
            url="https://api.example.com/users",
            http_method=HTTPMethod.POST,
            headers={"X-Request-ID": "42"},
            body={"name": "b"},
        )
        result = await requester.fetch(req, User)
        wire = transport.calls[0][0]
        assert result.value == User(id=2, name="b")
        assert wire.method == "POST"
        assert wire.content == b'{"name":"b"}'
        assert dict(wire.headers) == {
            "Accept": "application/json",
            "X-Request-ID": "42",
            "Content-Type": "application/json",
        }


class TestConvenienceMethods:
    """get/post/put/delete."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name,method", [
        ("get", "GET"), ("post", "POST"), ("put", "PUT"), ("delete", "DELETE"),
    ])
    async def test_method(self, make_requester, name, method):
        requester, transport = make_requester(RawResponse.completed(200, b'{"ok": true}'))
        result = await getattr(requester, name)(URL, dict, timeout=3)
        assert result == Success({"ok": True})
        wire, timeout = transport.calls[0]
        assert wire.method == method
        assert timeout == 3


class TestStylesAgree:
    """Every style resolves the same outcome the same way."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,payload", [
        (200, b'{"id": 1, "name": "a"}'),
        (200, b"not json"),
        (204, b""),
        (301, b""),
        (400, b'{"error": "bad"}'),
        (401, b""),
        (418, b"teapot"),
        (500, b'{"error": "boom"}'),
        (599, b""),
    ])
    async def test_callback_and_await_agree(self, make_requester, status, payload):
        requester, _ = make_requester(RawResponse.completed(status, payload))
        req = NetworkRequest(url=URL)

        callback_results = []
        requester.request(req, User, callback_results.append)
        awaited = await requester.fetch(req, User)

        assert callback_results == [awaited]

        if isinstance(awaited, Success):
            assert await collect(requester.publisher(req, User)) == [awaited.value]
        else:
            with pytest.raises(type(awaited.error)):
                await collect(requester.publisher(req, User))


class TestLogging:
    """Outcome logging through the package logger."""

    @pytest.mark.asyncio
    async def test_failure_logged_with_kind(self, make_requester, caplog):
        requester, _ = make_requester(RawResponse.completed(404, b"{}"))
        with caplog.at_level(logging.DEBUG, logger="network_kit"):
            await requester.fetch(NetworkRequest(url=URL + "?token=secret"), User)

        failed = [r for r in caplog.records if r.getMessage() == "Request failed"]
        assert len(failed) == 1
        assert failed[0].error_kind == "bad_request"
        assert "secret" not in failed[0].url

    @pytest.mark.asyncio
    async def test_headers_masked(self, make_requester, caplog):
        requester, _ = make_requester(RawResponse.completed(200, b"{}"))
        req = NetworkRequest(url=URL, headers={"Authorization": "Bearer abc"})
        with caplog.at_level(logging.DEBUG, logger="network_kit"):
            await requester.fetch(req, dict)

        started = [r for r in caplog.records if r.getMessage() == "Request started"]
        assert started[0].headers["Authorization"] == "***REDACTED***"


class TestCallbackFromWorkerThread:
    """request() over RequestsTransport: on_done runs in an executor done-callback."""

    def run(self, requester, target_type):
        done = threading.Event()
        results = []

        def on_complete(result):
            results.append(result)
            done.set()

        requester.request(NetworkRequest(url=URL), target_type, on_complete)
        assert done.wait(5), "on_complete was not called"
        return results

    @responses.activate
    def test_target_without_schema_delivered(self):
        responses.add(responses.GET, URL, json={"x": 1}, status=200)

        with NetworkRequester() as requester:
            results = self.run(requester, Opaque)

        assert len(results) == 1
        assert isinstance(results[0].error, InvalidJSONError)

    @responses.activate
    def test_codec_raising_becomes_unknown(self, caplog):
        class BrokenCodec(PydanticCodec):
            def decode(self, data, target_type):
                raise RuntimeError("codec exploded")

        responses.add(responses.GET, URL, json={"id": 1, "name": "a"}, status=200)

        with caplog.at_level(logging.ERROR, logger="network_kit"):
            with NetworkRequester(codec=BrokenCodec()) as requester:
                results = self.run(requester, User)

        assert results == [Failure(UnknownError("codec exploded"))]
        assert any(r.getMessage() == "Resolution raised" for r in caplog.records)
