"""Start and task command handlers."""

from dataclasses import replace
from typing import TYPE_CHECKING

from taskbot.channels.commands.base import CommandDefinition, CommandHandler, CommandResult

if TYPE_CHECKING:
    from taskbot.channels.commands.base import CommandContext
    from taskbot.model.message import Message


class TaskCommand(CommandHandler):
    """Start a new task: reset the wizard and ask for the description."""

    @property
    def definition(self) -> CommandDefinition:
        """Command metadata."""
        return CommandDefinition(
            name="task",
            description="Create a new Basecamp task",
            args_description="[description]",
        )

    async def handle(
        self,
        message: "Message",
        args: str,
        context: "CommandContext",
    ) -> CommandResult:
        """Execute the task command.

        Text after the command is used as the task description, so
        ``/task Fix the login page`` skips the description prompt.

        Returns:
            CommandResult with no response; the engine replies itself.
        """
        description = args.strip()
        if description:
            await context.engine.cancel(message.user_id, message.session_key)
            await context.engine.handle_message(replace(message, content=description))
        else:
            await context.engine.start_task(message.user_id, message.session_key)
        return CommandResult()


class StartCommand(TaskCommand):
    """Telegram's /start: same behaviour as /task."""

    @property
    def definition(self) -> CommandDefinition:
        """Command metadata."""
        return CommandDefinition(
            name="start",
            description="Start creating a task",
            hidden=True,
        )
