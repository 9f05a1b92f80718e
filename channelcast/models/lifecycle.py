"""Router lifecycle states and the transitions between them."""

from __future__ import annotations

from enum import Enum


class RouterState(str, Enum):
    """Lifecycle of a BroadcastRouter."""

    ENABLED = "enabled"
    DISABLED = "disabled"
    DISCONNECTED = "disconnected"


# Enforced by BroadcastRouter.  DISCONNECTED is terminal.
VALID_TRANSITIONS: dict[RouterState, set[RouterState]] = {
    RouterState.ENABLED: {RouterState.DISABLED, RouterState.DISCONNECTED},
    RouterState.DISABLED: {RouterState.ENABLED, RouterState.DISCONNECTED},
    RouterState.DISCONNECTED: set(),  # terminal
}
