"""In-process loopback bus.

``MemoryBroker`` stands in for the message-bus server; each
``MemoryTransport`` is one client handle attached to it.  Publishing on a
handle delivers synchronously, on the publisher's call stack, to every
attached handle subscribed to the channel.

Each handle keeps a bounded history of what it sent (default 1024
messages) so tests can observe send order.
"""

from __future__ import annotations

import collections
import logging
from typing import Any

from channelcast.bridge.transport import MessageListener, TransportError

logger = logging.getLogger(__name__)


class MemoryBroker:
    """Routes messages between attached ``MemoryTransport`` handles."""

    def __init__(self) -> None:
        self._handles: list[MemoryTransport] = []

    @property
    def handle_count(self) -> int:
        return len(self._handles)

    def attach(self, handle: MemoryTransport) -> None:
        if handle not in self._handles:
            self._handles.append(handle)

    def detach(self, handle: MemoryTransport) -> None:
        if handle in self._handles:
            self._handles.remove(handle)

    def route(self, channel: str, message: str) -> int:
        """Deliver *message* to every handle subscribed to *channel*."""
        receivers = [h for h in self._handles if h.is_subscribed(channel)]
        for handle in receivers:
            handle._deliver(channel, message)
        return len(receivers)

    def __repr__(self) -> str:
        return f"MemoryBroker(handles={len(self._handles)})"


class MemoryTransport:
    """A client handle on a ``MemoryBroker``.

    Parameters
    ----------
    broker:
        The broker to attach to.  Handles only see each other when they
        share a broker.
    name:
        Label used in logs and ``repr``.
    max_history:
        Depth of the sent-message history.
    """

    def __init__(
        self,
        broker: MemoryBroker,
        *,
        name: str = "memory",
        max_history: int = 1024,
    ) -> None:
        self._broker = broker
        self._name = name
        self._channels: set[str] = set()
        self._listeners: list[MessageListener] = []
        self._sent: collections.deque[tuple[str, str]] = collections.deque(
            maxlen=max_history
        )
        self._closed = False
        broker.attach(self)
        logger.info("MemoryTransport %s: attached to %r.", name, broker)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def channels(self) -> frozenset[str]:
        """Channels this handle currently receives."""
        return frozenset(self._channels)

    @property
    def sent(self) -> list[tuple[str, str]]:
        """``(channel, message)`` pairs sent through this handle, oldest first."""
        return list(self._sent)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def is_subscribed(self, channel: str) -> bool:
        return not self._closed and channel in self._channels

    # ------------------------------------------------------------------
    # Transport protocol
    # ------------------------------------------------------------------

    def publish(self, channel: str, message: str) -> int:
        self._check_open()
        self._sent.append((channel, message))
        receivers = self._broker.route(channel, message)
        logger.debug(
            "MemoryTransport %s: published on %r to %d receiver(s).",
            self._name,
            channel,
            receivers,
        )
        return receivers

    def subscribe(self, channel: str) -> int:
        self._check_open()
        self._channels.add(channel)
        return len(self._channels)

    def unsubscribe(self, channel: str) -> int:
        self._check_open()
        self._channels.discard(channel)
        return len(self._channels)

    def add_listener(self, listener: MessageListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: MessageListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def remove_all_listeners(self) -> None:
        self._listeners.clear()

    def close(self) -> None:
        if self._closed:
            return
        self._broker.detach(self)
        self._channels.clear()
        self._listeners.clear()
        self._closed = True
        logger.info("MemoryTransport %s: closed.", self._name)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _deliver(self, channel: str, message: str | bytes) -> None:
        for listener in list(self._listeners):
            listener(channel, message)

    def _check_open(self) -> None:
        if self._closed:
            raise TransportError(f"MemoryTransport {self._name} is closed.")

    def __enter__(self) -> MemoryTransport:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"MemoryTransport(name={self._name!r}, "
            f"channels={sorted(self._channels)!r}, closed={self._closed})"
        )
