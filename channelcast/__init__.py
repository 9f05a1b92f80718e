"""channelcast: channel multiplexing and broadcast duplication over pub/sub.

Every publish on a named channel is also sent on the reserved ``"all"``
channel, so global observers subscribe once and see every event once.
  - BroadcastRouter with an enabled/disabled/disconnected lifecycle
  - Explicit subscription handles for exact unsubscribe
  - Redis transport (redis-py) and an in-memory loopback transport
  - Swappable codec (JSON by default)
  - Env-driven config via pydantic-settings, Typer CLI
"""

__version__ = "0.1.0"
__description__ = (
    "Channel multiplexing and broadcast duplication over a publish/subscribe transport"
)

from channelcast.core.factory import create_router
from channelcast.core.router import (
    BroadcastRouter,
    PayloadError,
    RouterDisconnectedError,
    RouterError,
)
from channelcast.models.catalog import Channel, Entity, Event
from channelcast.models.subscription import Subscription

__all__ = [
    "BroadcastRouter",
    "Channel",
    "Entity",
    "Event",
    "PayloadError",
    "RouterDisconnectedError",
    "RouterError",
    "Subscription",
    "create_router",
    "__version__",
]
