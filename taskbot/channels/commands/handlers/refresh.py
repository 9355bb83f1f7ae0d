"""Refresh command handler."""

import logging
from typing import TYPE_CHECKING

from taskbot.channels.commands.base import CommandDefinition, CommandHandler, CommandResult
from taskbot.core.errors import DirectoryError

if TYPE_CHECKING:
    from taskbot.channels.commands.base import CommandContext
    from taskbot.model.message import Message

logger = logging.getLogger(__name__)


class RefreshCommand(CommandHandler):
    """Reload the people/project directory now instead of waiting for the TTL."""

    @property
    def definition(self) -> CommandDefinition:
        """Command metadata."""
        return CommandDefinition(
            name="refresh",
            description="Reload the people directory",
        )

    async def handle(
        self,
        message: "Message",
        args: str,
        context: "CommandContext",
    ) -> CommandResult:
        try:
            await context.directory.force_refresh()
        except DirectoryError as e:
            logger.error(f"Directory refresh failed: {e}")
            return CommandResult(response="❌ Couldn't reach the people directory. Try again later.")

        people = await context.directory.people()
        return CommandResult(response=f"🔄 Directory refreshed: {len(people)} people loaded.")
