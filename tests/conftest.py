"""
Module: conftest.py
Description: Shared pytest fixtures for Timber delivery tests.

Provides settings that ignore the environment, a scripted in-memory
transport, sample log records, and sleep/backoff stubs so retry tests
never block.
"""

from datetime import datetime, timezone
from typing import List, Mapping, Sequence, Union
from unittest.mock import Mock

import httpx
import pytest

from timber_delivery.config.settings import DeliverySettings
from timber_delivery.delivery.engine import DeliveryEngine
from timber_delivery.delivery.headers import build_headers
from timber_delivery.utils.logger import configure_logging

API_KEY = "123:abcd1234"
TEST_URL = "https://logs.timber.test/frames"

Outcome = Union[int, BaseException]


class StubTransport:
    """
    In-memory transport that replays scripted outcomes.

    Each outcome is either a status code to respond with or an exception
    to raise. The last outcome repeats once the script runs out.
    """

    def __init__(self, outcomes: Sequence[Outcome]):
        self.outcomes: List[Outcome] = list(outcomes)
        self.calls: List[dict] = []
        self.close_calls = 0

    def post(self, url: str, body: bytes, headers: Mapping[str, str]) -> httpx.Response:
        self.calls.append({"url": url, "body": body, "headers": headers})
        outcome = self.outcomes[min(len(self.calls), len(self.outcomes)) - 1]
        if isinstance(outcome, BaseException):
            raise outcome
        return httpx.Response(outcome)

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture(autouse=True)
def reset_logging():
    """Restore default logging configuration after each test."""
    yield
    configure_logging("INFO")


@pytest.fixture
def test_settings():
    """
    Provide delivery settings for testing.

    Disables .env loading for predictable tests.
    """
    return DeliverySettings(api_key=API_KEY, url=TEST_URL, pool_max=1, _env_file=None)


@pytest.fixture
def headers():
    return build_headers(API_KEY)


@pytest.fixture
def sleep():
    """Sleep stub recording requested delays."""
    return Mock(return_value=None)


@pytest.fixture
def backoff():
    """Backoff stub with a fixed, recognizable delay."""
    return Mock(return_value=7)


@pytest.fixture
def make_engine(headers, sleep, backoff):
    """Build a DeliveryEngine around a StubTransport with the given outcomes."""

    def _make(*outcomes: Outcome):
        transport = StubTransport(outcomes)
        engine = DeliveryEngine(
            transport=transport,
            headers=headers,
            url=TEST_URL,
            sleep=sleep,
            backoff=backoff,
        )
        return engine, transport

    return _make


@pytest.fixture
def sample_record():
    """Provide a typical record as handed over by the host framework."""
    return {
        "@timestamp": datetime(2017, 1, 1, 12, 30, 15, 250000, tzinfo=timezone.utc),
        "@version": "1",
        "message": "hi",
    }
