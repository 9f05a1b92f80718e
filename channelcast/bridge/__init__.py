"""Bridge layer between channelcast and the underlying message bus.

Modules
-------
transport
    The ``Transport`` protocol every backend implements, plus
    ``TransportError``.
redis_transport
    ``RedisTransport`` — redis-py client for publishing, and a PubSub
    worker thread feeding the shared inbound stream.
memory
    ``MemoryBroker`` / ``MemoryTransport`` — in-process loopback bus for
    tests, local development and single-process deployments.

The router opens two handles per process, one used only for sending and
one used only for receiving.
"""

from channelcast.bridge.memory import MemoryBroker, MemoryTransport
from channelcast.bridge.redis_transport import RedisTransport
from channelcast.bridge.transport import MessageListener, Transport, TransportError

__all__ = [
    "MemoryBroker",
    "MemoryTransport",
    "MessageListener",
    "RedisTransport",
    "Transport",
    "TransportError",
]
