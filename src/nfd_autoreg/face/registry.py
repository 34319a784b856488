"""Channel registry — one channel per local endpoint, created on first request."""

from __future__ import annotations

import logging
import threading
from typing import Callable

from .channel import Channel, UnixStreamChannel

logger = logging.getLogger(__name__)


class ChannelCreationError(Exception):
    """The channel for an endpoint could not be created."""

    def __init__(self, endpoint: str, reason: str) -> None:
        super().__init__(f"Cannot create channel for {endpoint}: {reason}")
        self.endpoint = endpoint
        self.reason = reason


class ChannelRegistry:
    """Create-or-get map from endpoint to channel.

    If create() is called twice with the same endpoint, only one channel is
    created; the second call returns the existing one. The registry owns
    every channel it hands out.
    """

    def __init__(self, channel_factory: Callable[[str], Channel] = UnixStreamChannel) -> None:
        self._channel_factory = channel_factory
        self._channels: dict[str, Channel] = {}
        self._lock = threading.Lock()

    def create(self, endpoint: str) -> Channel:
        """Return the channel for endpoint, creating it if needed.

        Raises ChannelCreationError if the channel cannot be created; the
        registry is left unchanged in that case.
        """
        with self._lock:
            channel = self._channels.get(endpoint)
            if channel is not None:
                return channel

            try:
                channel = self._channel_factory(endpoint)
            except (OSError, ValueError) as e:
                raise ChannelCreationError(endpoint, str(e)) from e

            self._channels[endpoint] = channel
            logger.info(f"Created channel: {endpoint}")
            return channel

    def find(self, endpoint: str) -> Channel | None:
        """Look up an existing channel. Never raises."""
        with self._lock:
            return self._channels.get(endpoint)

    def get_all(self) -> list[Channel]:
        with self._lock:
            return list(self._channels.values())

    @property
    def endpoints(self) -> list[str]:
        with self._lock:
            return list(self._channels.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._channels)

    def __contains__(self, endpoint: object) -> bool:
        with self._lock:
            return endpoint in self._channels

    async def close_all(self) -> None:
        """Close and forget every channel."""
        with self._lock:
            channels = list(self._channels.items())
            self._channels.clear()
        for endpoint, channel in channels:
            try:
                await channel.close()
            except Exception:
                logger.exception(f"Error closing channel {endpoint}")
