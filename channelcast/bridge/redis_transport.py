"""Redis transport — one redis-py connection per handle.

The sending side is a plain ``redis.Redis`` client.  The receiving side
lazily opens a ``PubSub`` on first subscribe and starts a daemon worker
thread (``PubSub.run_in_thread``) that feeds every arrival, tagged with
its channel, to the handle's listeners.  Listeners therefore run on the
worker thread, not on the thread that called ``subscribe``.

Message bodies are handed to listeners as raw bytes; decoding them is the
codec's job.  Send failures surface as ``redis.exceptions`` errors and are
not caught here.  Errors inside the worker thread are logged and the worker
keeps polling, backing off briefly after a connection error.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import redis

from channelcast.bridge.transport import MessageListener, TransportError

logger = logging.getLogger(__name__)

DEFAULT_REDIS_URL = "redis://localhost:6379/0"
RECONNECT_BACKOFF_SECONDS = 1.0


def _to_text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


class RedisTransport:
    """Send/receive handle onto a Redis server.

    Parameters
    ----------
    url:
        Redis connection URL.  Ignored when *client* is given.
    name:
        Label used in logs and ``repr``.
    poll_interval:
        Seconds the PubSub worker thread sleeps between polls.
    reconnect_backoff:
        Seconds the worker waits after a connection error before polling
        again.
    client:
        A pre-built ``redis.Redis`` client.  The transport takes ownership
        and closes it on ``close()``.
    client_kwargs:
        Extra keyword arguments forwarded to ``redis.Redis.from_url``
        (e.g. ``socket_timeout``, TLS settings).
    """

    def __init__(
        self,
        url: str = DEFAULT_REDIS_URL,
        *,
        name: str = "redis",
        poll_interval: float = 0.01,
        reconnect_backoff: float = RECONNECT_BACKOFF_SECONDS,
        client: redis.Redis | None = None,
        **client_kwargs: Any,
    ) -> None:
        self._name = name
        self._poll_interval = poll_interval
        self._reconnect_backoff = reconnect_backoff
        if client is None:
            client_kwargs.setdefault("decode_responses", False)
            client = redis.Redis.from_url(url, **client_kwargs)
        self._client = client
        self._pubsub: Any | None = None
        self._worker: Any | None = None
        self._listeners: list[MessageListener] = []
        self._closed = False
        logger.info("RedisTransport %s: opened client for %s.", name, url)

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
        if self._pubsub is None:
            return frozenset()
        return frozenset(_to_text(c) for c in self._pubsub.channels)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    # ------------------------------------------------------------------
    # Transport protocol
    # ------------------------------------------------------------------

    def publish(self, channel: str, message: str) -> int:
        self._check_open()
        receivers = self._client.publish(channel, message)
        logger.debug(
            "RedisTransport %s: published on %r to %s receiver(s).",
            self._name,
            channel,
            receivers,
        )
        return receivers

    def subscribe(self, channel: str) -> int:
        self._check_open()
        pubsub = self._ensure_pubsub()
        # Redis treats a repeated SUBSCRIBE to the same channel as a no-op.
        pubsub.subscribe(**{channel: self._handle_message})
        if self._worker is None:
            self._worker = pubsub.run_in_thread(
                sleep_time=self._poll_interval,
                daemon=True,
                exception_handler=self._on_worker_error,
            )
            logger.debug("RedisTransport %s: started PubSub worker.", self._name)
        count = len(pubsub.channels)
        logger.debug(
            "RedisTransport %s: subscription count on %r is now %d.",
            self._name,
            channel,
            count,
        )
        return count

    def unsubscribe(self, channel: str) -> int:
        self._check_open()
        if self._pubsub is None:
            return 0
        self._pubsub.unsubscribe(channel)
        return len(self._pubsub.channels)

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
        """Stop the worker thread and release both connections."""
        if self._closed:
            return
        self._closed = True
        self._listeners.clear()
        if self._worker is not None:
            self._worker.stop()
            self._worker.join(timeout=1.0)
            self._worker = None
        if self._pubsub is not None:
            self._pubsub.close()
            self._pubsub = None
        self._client.close()
        logger.info("RedisTransport %s: closed.", self._name)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _ensure_pubsub(self) -> Any:
        if self._pubsub is None:
            self._pubsub = self._client.pubsub(ignore_subscribe_messages=True)
        return self._pubsub

    def _handle_message(self, message: dict[str, Any]) -> None:
        channel = _to_text(message["channel"])
        data = message["data"]
        for listener in list(self._listeners):
            listener(channel, data)

    def _on_worker_error(
        self, exc: BaseException, pubsub: Any, thread: Any
    ) -> None:
        """Keep the PubSub worker alive through a failed poll."""
        if isinstance(exc, redis.exceptions.ConnectionError):
            logger.warning(
                "RedisTransport %s: connection error in PubSub worker (%s); "
                "retrying in %.1fs.",
                self._name,
                exc,
                self._reconnect_backoff,
            )
            time.sleep(self._reconnect_backoff)
            return
        logger.error(
            "RedisTransport %s: PubSub worker error; message dropped.",
            self._name,
            exc_info=exc,
        )

    def _check_open(self) -> None:
        if self._closed:
            raise TransportError(f"RedisTransport {self._name} is closed.")

    def __enter__(self) -> RedisTransport:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"RedisTransport(name={self._name!r}, closed={self._closed})"
