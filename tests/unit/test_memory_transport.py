"""Tests for the in-memory loopback transport."""

from __future__ import annotations

import pytest

from channelcast.bridge.memory import MemoryBroker, MemoryTransport
from channelcast.bridge.transport import Transport, TransportError


class TestMemoryBroker:
    def test_attach_is_idempotent(self, broker: MemoryBroker):
        handle = MemoryTransport(broker)
        broker.attach(handle)
        assert broker.handle_count == 1

    def test_route_counts_receivers(self, broker, publisher, subscriber):
        subscriber.subscribe("A")
        assert broker.route("A", "msg") == 1
        assert broker.route("B", "msg") == 0


class TestMemoryTransport:
    def test_satisfies_transport_protocol(self, publisher: MemoryTransport):
        assert isinstance(publisher, Transport)

    def test_delivers_tagged_messages_to_listeners(self, publisher, subscriber):
        received = []
        subscriber.add_listener(lambda channel, message: received.append((channel, message)))
        subscriber.subscribe("A")

        assert publisher.publish("A", "hello") == 1
        assert received == [("A", "hello")]

    def test_unsubscribed_channels_not_delivered(self, publisher, subscriber):
        received = []
        subscriber.add_listener(lambda channel, message: received.append(channel))
        subscriber.subscribe("A")
        publisher.publish("B", "ignored")
        assert received == []

    def test_every_listener_sees_every_channel(self, publisher, subscriber):
        first, second = [], []
        subscriber.add_listener(lambda c, m: first.append(c))
        subscriber.add_listener(lambda c, m: second.append(c))
        subscriber.subscribe("A")
        subscriber.subscribe("B")
        publisher.publish("A", "1")
        publisher.publish("B", "2")
        assert first == second == ["A", "B"]

    def test_subscribe_returns_channel_count(self, subscriber: MemoryTransport):
        assert subscriber.subscribe("A") == 1
        assert subscriber.subscribe("A") == 1
        assert subscriber.subscribe("B") == 2
        assert subscriber.unsubscribe("A") == 1

    def test_unsubscribe_stops_delivery(self, publisher, subscriber):
        received = []
        subscriber.add_listener(lambda c, m: received.append(m))
        subscriber.subscribe("A")
        subscriber.unsubscribe("A")
        publisher.publish("A", "late")
        assert received == []

    def test_remove_listener(self, publisher, subscriber):
        received = []
        listener = lambda c, m: received.append(m)  # noqa: E731
        subscriber.add_listener(listener)
        subscriber.remove_listener(listener)
        subscriber.remove_listener(listener)  # unknown listener is ignored
        subscriber.subscribe("A")
        publisher.publish("A", "x")
        assert received == []

    def test_sent_history_is_bounded(self, broker: MemoryBroker):
        handle = MemoryTransport(broker, max_history=2)
        for i in range(3):
            handle.publish("A", str(i))
        assert handle.sent == [("A", "1"), ("A", "2")]

    def test_close_detaches_from_broker(self, broker, publisher, subscriber):
        subscriber.subscribe("A")
        subscriber.close()
        assert subscriber.is_closed
        assert broker.handle_count == 1
        assert publisher.publish("A", "x") == 0

    def test_use_after_close_raises(self, publisher: MemoryTransport):
        publisher.close()
        publisher.close()
        with pytest.raises(TransportError, match="closed"):
            publisher.publish("A", "x")
        with pytest.raises(TransportError):
            publisher.subscribe("A")

    def test_context_manager_closes(self, broker: MemoryBroker):
        with MemoryTransport(broker) as handle:
            pass
        assert handle.is_closed
