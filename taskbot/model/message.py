"""Domain models for chat messages and inline buttons."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class MessageDirection(Enum):
    """Direction of a message."""

    INBOUND = "inbound"
    OUTBOUND = "outbound"


@dataclass
class Message:
    """Unified message format across channels.

    Adapts platform-specific messages to a common structure.
    """

    id: str
    channel: str
    session_key: str
    user_id: str
    content: str
    direction: MessageDirection = MessageDirection.INBOUND
    timestamp: datetime = field(default_factory=datetime.now)
    reply_to_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_command(self) -> bool:
        """Check if message is a command (starts with /)."""
        return self.content.strip().startswith("/")

    def parse_command(self) -> tuple[str, str]:
        """Parse command and arguments from message.

        Returns:
            Tuple of (command_name, arguments_string).
        """
        if not self.is_command:
            return ("", self.content)

        parts = self.content.strip().split(maxsplit=1)
        command = parts[0][1:]
        args = parts[1] if len(parts) > 1 else ""
        return (command, args)


@dataclass(frozen=True)
class Button:
    """An inline button: visible label plus opaque callback data."""

    text: str
    data: str


# Rows of buttons, rendered top to bottom
Keyboard = list[list[Button]]


@dataclass
class ButtonPress:
    """A callback from an inline button press.

    Attributes:
        session_key: Chat the keyboard was shown in.
        user_id: User who pressed the button.
        data: Callback data of the pressed button.
        message_id: Message that carried the keyboard, if known.
    """

    session_key: str
    user_id: str
    data: str
    message_id: str | None = None
