"""Base abstractions for the command system."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from taskbot.channels.base import ChannelAdapter
    from taskbot.conversation.engine import ConversationEngine
    from taskbot.directory.cache import DirectoryCache
    from taskbot.model.message import Message


@dataclass
class CommandDefinition:
    """Metadata for a registered command."""

    name: str  # e.g., "task", "cancel"
    description: str  # Short description for /help
    hidden: bool = False  # If True, omit from /help
    args_description: str | None = None  # e.g., "<name> - <status>"


@dataclass
class CommandContext:
    """Runtime context passed to command handlers."""

    channel: "ChannelAdapter"
    engine: "ConversationEngine"
    directory: "DirectoryCache"
    command_router: Any = None  # CommandRouter, avoid circular import


@dataclass
class CommandResult:
    """Result from a command handler."""

    response: str | None = None  # Text to send back to user
    handled: bool = True  # If False, treat the message as plain text


class CommandHandler(ABC):
    """Base class for command implementations."""

    @property
    @abstractmethod
    def definition(self) -> CommandDefinition:
        """Command metadata."""
        ...

    @abstractmethod
    async def handle(
        self,
        message: "Message",
        args: str,
        context: CommandContext,
    ) -> CommandResult:
        """Execute the command."""
        ...
