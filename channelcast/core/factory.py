"""Build a BroadcastRouter from configuration.

Call ``create_router()`` once at process start and pass the router to
the producers and consumers that need it.
"""

from __future__ import annotations

import logging

from channelcast.bridge.memory import MemoryBroker, MemoryTransport
from channelcast.bridge.redis_transport import RedisTransport
from channelcast.bridge.transport import Transport
from channelcast.config import ChannelcastConfig
from channelcast.core.codec import Codec
from channelcast.core.router import BroadcastRouter

logger = logging.getLogger(__name__)


def open_transports(config: ChannelcastConfig) -> tuple[Transport, Transport]:
    """Open the (publisher, subscriber) handle pair for the configured backend."""
    if config.is_redis:
        publisher = RedisTransport(
            config.redis_url, name="publisher", poll_interval=config.poll_interval
        )
        subscriber = RedisTransport(
            config.redis_url, name="subscriber", poll_interval=config.poll_interval
        )
        return publisher, subscriber

    broker = MemoryBroker()
    publisher = MemoryTransport(
        broker, name="publisher", max_history=config.history_size
    )
    subscriber = MemoryTransport(
        broker, name="subscriber", max_history=config.history_size
    )
    return publisher, subscriber


def create_router(
    config: ChannelcastConfig | None = None,
    *,
    codec: Codec | None = None,
) -> BroadcastRouter:
    """Create a router, opening transports only when the feature is enabled."""
    config = config if config is not None else ChannelcastConfig()

    if not config.enabled:
        logger.info("Broadcasting disabled by configuration; no transports opened.")
        return BroadcastRouter(codec=codec, enabled=False)

    publisher, subscriber = open_transports(config)
    logger.info("Router created with %s transport.", config.transport)
    return BroadcastRouter(publisher, subscriber, codec=codec)
