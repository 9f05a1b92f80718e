"""channelcast data models — catalogs, lifecycle states, subscription handles."""

from channelcast.models.catalog import (
    ALL_CHANNEL,
    CHANNELS,
    ENTITIES,
    EVENTS,
    Channel,
    Entity,
    Event,
)
from channelcast.models.lifecycle import VALID_TRANSITIONS, RouterState
from channelcast.models.subscription import Listener, Subscription
