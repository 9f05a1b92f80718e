"""Broadcast router — channel multiplexing with broadcast duplication.

Producers publish payloads on named channels; consumers subscribe
callbacks per channel.  Every publish on a channel other than ``"all"``
is first duplicated onto ``"all"``, so global observers subscribe once
and see every event exactly once.

The router owns two transport handles: one used only for sending, one
used only for receiving.  The receiving handle multiplexes every
subscribed channel onto a single inbound stream; the router attaches one
listener to that stream and dispatches each arrival to the callbacks
registered for its channel, in registration order.

While the router is disabled, publish/subscribe/unsubscribe silently do
nothing.  After ``disconnect()`` every operation raises
``RouterDisconnectedError``.

Usage
-----
>>> router = BroadcastRouter(publisher, subscriber)
>>> sub = router.subscribe(Channel.MEDICAL, handle_medical)
>>> router.subscribe(Channel.ALL, audit_everything)
>>> router.publish(Channel.MEDICAL, {"event": Event.CREATE, "entity": Entity.PATIENT})
>>> router.unsubscribe(Channel.MEDICAL, sub)
>>> router.disconnect()
"""

from __future__ import annotations

import logging
import time
from collections.abc import MutableMapping
from enum import Enum
from typing import Any, Callable, Mapping

from channelcast.bridge.transport import Transport
from channelcast.core.codec import Codec, DeserializationError, JsonCodec
from channelcast.models.catalog import ALL_CHANNEL, CHANNELS, ENTITIES, EVENTS
from channelcast.models.lifecycle import VALID_TRANSITIONS, RouterState
from channelcast.models.subscription import Listener, Subscription

logger = logging.getLogger(__name__)


class RouterError(RuntimeError):
    """Raised when the router is driven through an invalid lifecycle step."""


class RouterDisconnectedError(RouterError):
    """Raised when a disconnected router is used again."""


class PayloadError(TypeError):
    """Raised when a payload cannot carry the stamped envelope fields."""


def now_ms() -> int:
    """Wall-clock time in integer milliseconds since the epoch."""
    return int(time.time() * 1000)


def _channel_name(channel: str | Enum) -> str:
    name = channel.value if isinstance(channel, Enum) else channel
    if not isinstance(name, str) or not name:
        raise ValueError(f"Channel must be a non-empty string, got {channel!r}")
    return name


class BroadcastRouter:
    """Publishes on, subscribes to, and tears down broadcast channels.

    Parameters
    ----------
    publisher:
        Transport handle used only for sending.
    subscriber:
        Transport handle used only for receiving.  Must be a different
        handle from *publisher*.
    codec:
        Wire codec; defaults to ``JsonCodec()``.
    enabled:
        Initial state.  A router built without handles is normally built
        disabled (see ``create_router``).
    clock:
        Source of the millisecond ``timestamp`` stamped on each envelope.
    """

    def __init__(
        self,
        publisher: Transport | None = None,
        subscriber: Transport | None = None,
        *,
        codec: Codec | None = None,
        enabled: bool = True,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        if (publisher is None) != (subscriber is None):
            raise ValueError("publisher and subscriber handles must be given together")
        if publisher is not None and publisher is subscriber:
            raise ValueError("publisher and subscriber must be separate handles")

        self._publisher = publisher
        self._subscriber = subscriber
        self._codec: Codec = codec if codec is not None else JsonCodec()
        self._clock = clock
        self._state = RouterState.ENABLED if enabled else RouterState.DISABLED
        # channel -> subscriptions in registration order
        self._registry: dict[str, list[Subscription]] = {}

        self._inbound_listener = self._dispatch
        if self._subscriber is not None:
            self._subscriber.add_listener(self._inbound_listener)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def state(self) -> RouterState:
        return self._state

    @property
    def disabled(self) -> bool:
        """``True`` unless the router is ENABLED."""
        return self._state != RouterState.ENABLED

    @property
    def has_transports(self) -> bool:
        return self._publisher is not None

    @property
    def is_connected(self) -> bool:
        """Router holds open handles and has not been disconnected."""
        return self.has_transports and self._state != RouterState.DISCONNECTED

    @property
    def codec(self) -> Codec:
        return self._codec

    @property
    def subscribed_channels(self) -> tuple[str, ...]:
        """Channels with at least one live subscription."""
        return tuple(self._registry)

    @property
    def channels(self) -> Mapping[str, str]:
        """Channel catalog, symbolic name -> channel value."""
        return CHANNELS

    @property
    def events(self) -> Mapping[str, str]:
        """Event catalog for producers to put in their payloads."""
        return EVENTS

    @property
    def entities(self) -> Mapping[str, str]:
        """Entities an event can affect."""
        return ENTITIES

    def subscription_count(self, channel: str | Enum | None = None) -> int:
        """Live subscriptions on *channel*, or across all channels."""
        if channel is None:
            return sum(len(subs) for subs in self._registry.values())
        return len(self._registry.get(_channel_name(channel), ()))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def enable(self) -> None:
        """Resume publish/subscribe/unsubscribe.  Never opens handles."""
        self._transition(RouterState.ENABLED)
        if not self.has_transports:
            logger.warning(
                "Router enabled without transport handles; operations stay no-ops."
            )

    def disable(self) -> None:
        """Suppress publish/subscribe/unsubscribe.  Handles stay open."""
        self._transition(RouterState.DISABLED)

    def disconnect(self) -> None:
        """Drop every listener and close both handles.  Terminal."""
        self._transition(RouterState.DISCONNECTED)
        dropped = self.subscription_count()
        self._registry.clear()

        if self._subscriber is not None:
            self._subscriber.remove_all_listeners()
            self._subscriber.close()
        if self._publisher is not None:
            self._publisher.remove_all_listeners()
            self._publisher.close()
        logger.info("Router disconnected (%d subscription(s) dropped).", dropped)

    def _transition(self, target: RouterState) -> None:
        current = self._state
        if current == RouterState.DISCONNECTED:
            raise RouterDisconnectedError("Router is disconnected.")
        if target == current:
            return
        if target not in VALID_TRANSITIONS[current]:
            raise RouterError(
                f"Cannot transition router from {current.value} to {target.value}."
            )
        self._state = target
        logger.info("Router %s -> %s.", current.value, target.value)

    def _active(self, operation: str, channel: Any) -> bool:
        """Whether *operation* should run; raises once disconnected."""
        if self._state == RouterState.DISCONNECTED:
            raise RouterDisconnectedError(
                f"Cannot {operation} on {channel!r}: router is disconnected."
            )
        if self._state == RouterState.DISABLED:
            logger.debug("Router disabled; skipping %s on %r.", operation, channel)
            return False
        if not self.has_transports:
            logger.debug("Router has no transports; skipping %s on %r.", operation, channel)
            return False
        return True

    # ------------------------------------------------------------------
    # Publish
    # ------------------------------------------------------------------

    @staticmethod
    def broadcast_targets(channel: str) -> tuple[str, ...]:
        """Ordered send targets: ``"all"`` first, then the channel itself."""
        if channel == ALL_CHANNEL:
            return (ALL_CHANNEL,)
        return (ALL_CHANNEL, channel)

    def publish(
        self, channel: str | Enum, payload: MutableMapping[str, Any]
    ) -> MutableMapping[str, Any] | None:
        """Stamp, serialize and broadcast *payload* on *channel*.

        The payload is modified in place: ``timestamp`` (milliseconds) and
        ``channel`` are set, overwriting any existing values.  The message
        goes out on ``"all"`` first unless *channel* is ``"all"``, then on
        *channel*.

        Returns the stamped payload, or ``None`` when the router is
        disabled.

        Raises
        ------
        PayloadError
            If *payload* is not a mutable mapping.
        SerializationError
            If the codec cannot encode the payload.  Nothing is sent.
        """
        if not self._active("publish", channel):
            return None

        name = _channel_name(channel)
        if not isinstance(payload, MutableMapping):
            raise PayloadError(
                f"Payload must be a mutable mapping, got {type(payload).__name__}"
            )

        logger.debug('Received publication on channel "%s".', name)

        payload["timestamp"] = self._clock()
        payload["channel"] = name
        message = self._codec.serialize(payload)

        for target in self.broadcast_targets(name):
            self._publisher.publish(target, message)
        return payload

    # ------------------------------------------------------------------
    # Subscribe / unsubscribe
    # ------------------------------------------------------------------

    def subscribe(self, channel: str | Enum, callback: Listener) -> Subscription | None:
        """Invoke *callback* with each envelope published on *channel*.

        Every call registers a new, independent subscription, even for a
        channel/callback pair that is already registered.  Returns the
        ``Subscription`` handle, or ``None`` when the router is disabled.
        """
        if not self._active("subscribe", channel):
            return None

        name = _channel_name(channel)
        if not callable(callback):
            raise TypeError(f"Callback must be callable, got {type(callback).__name__}")

        count = self._subscriber.subscribe(name)
        logger.debug("Subscription count on channel [%s] is now [%s].", name, count)

        subscription = Subscription(channel=name, callback=callback)
        self._registry.setdefault(name, []).append(subscription)
        return subscription

    def unsubscribe(self, channel: str | Enum, handle: Subscription | Listener) -> int:
        """Remove a listener from *channel*.

        *handle* is either the ``Subscription`` returned by ``subscribe()``,
        which removes exactly that subscription, or the original callback,
        which removes every subscription of that callback on *channel*.
        Other listeners on the channel are left alone.  The receiving
        handle stops listening to the channel once it has no listeners.

        Returns the number of subscriptions removed; unknown handles are a
        no-op.
        """
        if not self._active("unsubscribe", channel):
            return 0

        name = _channel_name(channel)
        logger.debug("Unsubscribing a listener from %s.", name)

        subscriptions = self._registry.get(name)
        if not subscriptions:
            return 0

        if isinstance(handle, Subscription):
            keep = [s for s in subscriptions if s.subscription_id != handle.subscription_id]
        else:
            keep = [s for s in subscriptions if s.callback != handle]

        removed = len(subscriptions) - len(keep)
        if not removed:
            return 0

        if keep:
            self._registry[name] = keep
        else:
            del self._registry[name]
            self._subscriber.unsubscribe(name)
        return removed

    # ------------------------------------------------------------------
    # Inbound dispatch
    # ------------------------------------------------------------------

    def _dispatch(self, channel: str, message: str | bytes) -> None:
        """Hand an inbound message to the listeners of its channel.

        Each listener gets its own decoded copy.  A listener that raises is
        logged and does not stop delivery to the rest.
        """
        if self._state != RouterState.ENABLED:
            return
        subscriptions = self._registry.get(channel)
        if not subscriptions:
            return

        for subscription in list(subscriptions):
            try:
                payload = self._codec.deserialize(message)
            except DeserializationError as exc:
                logger.warning("Dropping message on channel %r: %s", channel, exc)
                return
            try:
                subscription.callback(payload)
            except Exception:
                logger.exception(
                    "Listener %s on channel %r raised.",
                    subscription.subscription_id,
                    channel,
                )

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> BroadcastRouter:
        return self

    def __exit__(self, *exc: Any) -> None:
        if self._state != RouterState.DISCONNECTED:
            self.disconnect()

    def __repr__(self) -> str:
        return (
            f"BroadcastRouter(state={self._state.value}, "
            f"channels={len(self._registry)}, "
            f"subscriptions={self.subscription_count()})"
        )
