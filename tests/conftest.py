"""Shared test fixtures for channelcast."""

from __future__ import annotations

import itertools
import os
from collections.abc import Callable, Iterator
from typing import Any

import pytest

from channelcast.bridge.memory import MemoryBroker, MemoryTransport
from channelcast.core.router import BroadcastRouter
from channelcast.models.lifecycle import RouterState


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CHANNELCAST_* variables from the host out of every test."""
    for key in list(os.environ):
        if key.startswith("CHANNELCAST_"):
            monkeypatch.delenv(key)


@pytest.fixture
def broker() -> MemoryBroker:
    """Provide a fresh in-memory broker."""
    return MemoryBroker()


@pytest.fixture
def publisher(broker: MemoryBroker) -> MemoryTransport:
    """Provide the sending handle attached to the test broker."""
    return MemoryTransport(broker, name="publisher")


@pytest.fixture
def subscriber(broker: MemoryBroker) -> MemoryTransport:
    """Provide the receiving handle attached to the test broker."""
    return MemoryTransport(broker, name="subscriber")


@pytest.fixture
def router(
    publisher: MemoryTransport, subscriber: MemoryTransport
) -> Iterator[BroadcastRouter]:
    """Provide an enabled router over the in-memory broker."""
    r = BroadcastRouter(publisher, subscriber)
    yield r
    if r.state != RouterState.DISCONNECTED:
        r.disconnect()


# ---------------------------------------------------------------------------
# Payload factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_payload() -> Callable[..., dict[str, Any]]:
    """Factory fixture: build a distinct payload on every call."""
    counter = itertools.count(1)

    def _factory(**overrides: Any) -> dict[str, Any]:
        payload: dict[str, Any] = {"id": next(counter), "name": "John Doe"}
        payload.update(overrides)
        return payload

    return _factory


@pytest.fixture
def payload(make_payload: Callable[..., dict[str, Any]]) -> dict[str, Any]:
    """Convenience: a ready-made payload."""
    return make_payload()
