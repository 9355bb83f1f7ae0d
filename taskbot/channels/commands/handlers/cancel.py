"""Cancel command handler."""

from typing import TYPE_CHECKING

from taskbot.channels.commands.base import CommandDefinition, CommandHandler, CommandResult

if TYPE_CHECKING:
    from taskbot.channels.commands.base import CommandContext
    from taskbot.model.message import Message


class CancelCommand(CommandHandler):
    """Abandon the task being created."""

    @property
    def definition(self) -> CommandDefinition:
        """Command metadata."""
        return CommandDefinition(
            name="cancel",
            description="Cancel the task being created",
        )

    async def handle(
        self,
        message: "Message",
        args: str,
        context: "CommandContext",
    ) -> CommandResult:
        cancelled = await context.engine.cancel(message.user_id, message.session_key)
        if cancelled:
            return CommandResult(response="❌ Task creation cancelled. Send a new message whenever you're ready.")
        return CommandResult(response="Nothing to cancel.")
