"""Local listening channels."""

from .channel import Channel, UnixStreamChannel
from .registry import ChannelCreationError, ChannelRegistry

__all__ = ["Channel", "ChannelCreationError", "ChannelRegistry", "UnixStreamChannel"]
