"""
Pytest configuration and fixtures for network-kit tests.
"""

from typing import List, Optional, Tuple

import pytest
import responses as responses_lib

from network_kit.core.config import NetworkConfig
from network_kit.core.logging.config import LoggingConfig
from network_kit.core.request import WireRequest
from network_kit.core.requester import NetworkRequester
from network_kit.core.resolver import RawResponse
from network_kit.core.transport import Transport


class FakeTransport(Transport):
    """
    In-memory transport.

    Args:
        outcome: RawResponse handed to every call
        raises: Exception raised by submit/asend instead
        no_response: submit reports no response object at all
        repeat: how many times submit calls on_done
    """

    def __init__(
        self,
        outcome: Optional[RawResponse] = None,
        raises: Optional[Exception] = None,
        no_response: bool = False,
        repeat: int = 1,
    ):
        self.outcome = outcome
        self.raises = raises
        self.no_response = no_response
        self.repeat = repeat
        self.calls: List[Tuple[WireRequest, float]] = []
        self.closed = False

    def submit(self, wire, timeout, on_done):
        self.calls.append((wire, timeout))
        if self.raises is not None:
            raise self.raises
        for _ in range(self.repeat):
            on_done(None if self.no_response else self.outcome)

    async def asend(self, wire, timeout):
        self.calls.append((wire, timeout))
        if self.raises is not None:
            raise self.raises
        return self.outcome

    def close(self):
        self.closed = True


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def fake_transport():
    """Factory for FakeTransport instances."""
    return FakeTransport


@pytest.fixture
def make_requester():
    """Build a NetworkRequester around a FakeTransport."""

    def _make(outcome=None, config=None, **transport_kwargs):
        transport = FakeTransport(outcome=outcome, **transport_kwargs)
        return NetworkRequester(transport=transport, config=config), transport

    return _make


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def config():
    """Default config with a short timeout."""
    return NetworkConfig.create(request_timeout=10)


@pytest.fixture
def logging_config_with_file(tmp_path):
    """
    LoggingConfig with file logging enabled.

    Uses temporary directory for log files to avoid cleanup issues.
    """
    log_file = tmp_path / "test.log"
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path=str(log_file)
    )
