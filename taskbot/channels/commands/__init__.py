"""Slash-command definitions, routing and handlers."""

from taskbot.channels.commands.base import CommandContext, CommandDefinition, CommandHandler, CommandResult
from taskbot.channels.commands.router import CommandRouter

__all__ = ["CommandContext", "CommandDefinition", "CommandHandler", "CommandResult", "CommandRouter"]
