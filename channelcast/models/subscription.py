"""Subscription handles returned by BroadcastRouter.subscribe()."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field

Listener = Callable[[Any], Any]


class Subscription(BaseModel):
    """One registered listener on one channel.

    The handle is opaque to callers: keep it and hand it back to
    ``unsubscribe()`` to remove exactly this listener.  Two subscriptions
    with the same channel and callback are still distinct handles.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    subscription_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    channel: str
    callback: Listener
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
