"""Command handlers for taskbot."""

from taskbot.channels.commands.base import CommandHandler
from taskbot.channels.commands.handlers.availability import AvailabilityCommand
from taskbot.channels.commands.handlers.cancel import CancelCommand
from taskbot.channels.commands.handlers.help import HelpCommand
from taskbot.channels.commands.handlers.refresh import RefreshCommand
from taskbot.channels.commands.handlers.start import StartCommand, TaskCommand


def get_bot_commands() -> list[CommandHandler]:
    """Return all command handlers for registration.

    Returns:
        List of command handler instances.
    """
    return [
        StartCommand(),
        TaskCommand(),
        CancelCommand(),
        HelpCommand(),
        AvailabilityCommand(),
        RefreshCommand(),
    ]


__all__ = [
    "AvailabilityCommand",
    "CancelCommand",
    "get_bot_commands",
    "HelpCommand",
    "RefreshCommand",
    "StartCommand",
    "TaskCommand",
]
