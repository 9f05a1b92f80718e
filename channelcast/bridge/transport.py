"""Transport protocol — what the router needs from a message bus handle.

A handle publishes serialized messages by channel name, subscribes to
channel names, and multiplexes every subscribed channel onto one shared
inbound stream.  Listeners attached to that stream receive
``(channel, message)`` pairs for every arrival, whatever the channel.
"""

from __future__ import annotations

from typing import Callable, Protocol, Union, runtime_checkable

MessageListener = Callable[[str, Union[str, bytes]], None]


class TransportError(RuntimeError):
    """Raised when a transport-level operation fails."""


@runtime_checkable
class Transport(Protocol):
    """Send/receive handle onto a publish/subscribe bus."""

    @property
    def is_closed(self) -> bool: ...

    def publish(self, channel: str, message: str) -> int:
        """Send *message* on *channel*.  Returns the receiver count."""
        ...

    def subscribe(self, channel: str) -> int:
        """Begin delivery of *channel* on the inbound stream.

        Subscribing to a channel already subscribed is not an error.
        Returns the number of channels this handle now receives.
        """
        ...

    def unsubscribe(self, channel: str) -> int:
        """Stop delivery of *channel* entirely."""
        ...

    def add_listener(self, listener: MessageListener) -> None: ...

    def remove_listener(self, listener: MessageListener) -> None: ...

    def remove_all_listeners(self) -> None: ...

    def close(self) -> None: ...
