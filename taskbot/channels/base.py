"""Base channel adapter interface."""

from abc import ABC, abstractmethod
from collections.abc import Callable, Coroutine
from typing import Any

from taskbot.model.message import ButtonPress, Keyboard, Message

MessageCallback = Callable[[Message], Coroutine[Any, Any, None]]
ButtonCallback = Callable[[ButtonPress], Coroutine[Any, Any, None]]


class ChannelAdapter(ABC):
    """Abstract base class for chat channel adapters.

    Channel adapters handle:
    - Protocol adaptation (platform-specific API to common Message format)
    - Access control (allowlists)
    - Sending text with optional inline keyboards, and deleting messages
    - Delivering inbound messages and button presses to callbacks
    """

    name: str = "base"

    @abstractmethod
    async def start(self) -> None:
        """Start the channel adapter (connect, authenticate, etc.)."""
        ...

    @abstractmethod
    async def stop(self) -> None:
        """Stop the channel adapter gracefully."""
        ...

    @abstractmethod
    async def send_message(
        self,
        session_key: str,
        content: str,
        keyboard: Keyboard | None = None,
        **kwargs: Any,
    ) -> Message:
        """Send a message to a session.

        Args:
            session_key: The session to send to.
            content: Plain-text message content.
            keyboard: Optional inline keyboard attached to the message.
            **kwargs: Channel-specific options.

        Returns:
            The sent Message object.
        """
        ...

    @abstractmethod
    async def delete_message(self, session_key: str, message_id: str) -> None:
        """Delete a previously sent message. Failures are logged, not raised."""
        ...

    @abstractmethod
    def on_message(self, callback: MessageCallback) -> None:
        """Register a callback for incoming messages and commands."""
        ...

    @abstractmethod
    def on_button(self, callback: ButtonCallback) -> None:
        """Register a callback for inline-button presses."""
        ...

    async def register_commands(self, commands: list[Any]) -> None:
        """Register available commands with the channel platform.

        Default implementation is a no-op.
        """
        pass

    def build_session_key(self, *parts: str | int) -> str:
        """Build a session key like 'channel:part1:part2'."""
        return f"{self.name}:" + ":".join(str(p) for p in parts)
