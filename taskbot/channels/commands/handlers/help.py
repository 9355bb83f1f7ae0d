"""Help command handler."""

from typing import TYPE_CHECKING

from taskbot.channels.commands.base import CommandDefinition, CommandHandler, CommandResult

if TYPE_CHECKING:
    from taskbot.channels.commands.base import CommandContext
    from taskbot.model.message import Message


class HelpCommand(CommandHandler):
    """Display available commands."""

    @property
    def definition(self) -> CommandDefinition:
        """Command metadata."""
        return CommandDefinition(
            name="help",
            description="Show available commands",
        )

    async def handle(
        self,
        message: "Message",
        args: str,
        context: "CommandContext",
    ) -> CommandResult:
        """Execute the help command.

        Args:
            message: Incoming message.
            args: Command arguments (unused).
            context: Command execution context.

        Returns:
            CommandResult with formatted help text.
        """
        commands = []
        if context.command_router:
            commands = context.command_router.list_commands()

        lines = [
            "🤖 Send me a message describing a task and I'll create it in Basecamp.",
            "Describe several tasks at once with lines like 'Sarah - fix the footer. update the logo.'",
            "",
            "Available commands:",
        ]
        for cmd in commands:
            args_hint = f" {cmd.args_description}" if cmd.args_description else ""
            lines.append(f"/{cmd.name}{args_hint} - {cmd.description}")

        return CommandResult(response="\n".join(lines))
