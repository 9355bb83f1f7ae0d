"""Availability command handler."""

import logging
import re
from typing import TYPE_CHECKING

from taskbot.channels.commands.base import CommandDefinition, CommandHandler, CommandResult
from taskbot.core.errors import DirectoryError

if TYPE_CHECKING:
    from taskbot.channels.commands.base import CommandContext
    from taskbot.model.message import Message

logger = logging.getLogger(__name__)

_ARGS = re.compile(r"^(?P<name>.+?)\s+[-–]\s+(?P<status>.+)$")

USAGE = "Usage: /availability <name> - <status>\nExample: /availability Sarah - out of office"


class AvailabilityCommand(CommandHandler):
    """Set a person's availability status in the directory."""

    @property
    def definition(self) -> CommandDefinition:
        """Command metadata."""
        return CommandDefinition(
            name="availability",
            description="Update someone's availability",
            args_description="<name> - <status>",
        )

    async def handle(
        self,
        message: "Message",
        args: str,
        context: "CommandContext",
    ) -> CommandResult:
        """Match the name with the assignee rules and update the record."""
        match = _ARGS.match(args.strip())
        if not match:
            return CommandResult(response=USAGE)

        name = match.group("name").strip()
        status = match.group("status").strip()

        try:
            person = await context.directory.find_person(name)
        except DirectoryError as e:
            logger.error(f"Availability update failed, directory unavailable: {e}")
            return CommandResult(response="❌ The people directory is unavailable right now. Try again later.")

        if person is None:
            return CommandResult(response=f"❌ No one named '{name}' in the directory.")

        if not await context.directory.set_person_availability(person, status):
            return CommandResult(response=f"❌ Couldn't update {person.name}'s availability.")

        logger.info(f"User {message.user_id} set availability of {person.name} to '{status}'")
        return CommandResult(response=f"✅ {person.name} is now '{status}'.")
