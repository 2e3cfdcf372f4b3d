"""Shared fixtures for agentctx tests."""

from typing import Any

import pytest

from agentctx.models.options import CollectOptions
from agentctx.models.result import CollectorResult

from tests.factories import FRONTMOST, HOST, FakeRunner, StubCollector


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_options():
    def _make(**overrides: Any) -> CollectOptions:
        return CollectOptions(**overrides)

    return _make


@pytest.fixture
def mandatory_stubs() -> dict[str, StubCollector]:
    """Successful host and frontmost collectors."""
    return {
        "host": StubCollector("host", CollectorResult(data=HOST)),
        "frontmost": StubCollector("frontmost", CollectorResult(data=FRONTMOST)),
    }
