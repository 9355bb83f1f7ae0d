"""Channel adapters for chat platforms."""

from taskbot.channels.base import ChannelAdapter
from taskbot.channels.telegram import TelegramChannel

__all__ = [
    "ChannelAdapter",
    "TelegramChannel",
    # commands subpackage is available at taskbot.channels.commands
]
