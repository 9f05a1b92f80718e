"""Runtime configuration — env-driven.

Settings come from ``CHANNELCAST_*`` environment variables or a ``.env``
file in the working directory.
"""

from __future__ import annotations

import logging
import sys
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class ChannelcastConfig(BaseSettings):
    """Router and transport configuration with environment overrides.

    Examples
    --------
    Override via environment::

        export CHANNELCAST_REDIS_URL=redis://cache.internal:6379/2
        export CHANNELCAST_ENABLED=false
        export CHANNELCAST_LOG_LEVEL=DEBUG

    Or via .env file::

        CHANNELCAST_TRANSPORT=memory
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CHANNELCAST_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Feature switch: a disabled router opens no connections
    enabled: bool = True

    # Transport
    transport: Literal["redis", "memory"] = "redis"
    redis_url: str = "redis://localhost:6379/0"
    poll_interval: float = 0.01  # seconds between PubSub polls
    history_size: int = 1024  # sent-message history of memory handles

    # Observability
    log_level: str = "INFO"

    @property
    def is_redis(self) -> bool:
        """Whether the Redis backend is configured."""
        return self.transport == "redis"


def configure_logging(level: str = "INFO") -> None:
    """Attach a stderr handler to the root logger at *level*.

    Does nothing if the root logger already has handlers.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if root.handlers:
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
