"""Tests for the command router."""

from unittest.mock import MagicMock

import pytest

from taskbot.channels.commands.base import CommandDefinition, CommandHandler, CommandResult
from taskbot.channels.commands.router import CommandRouter
from taskbot.model.message import Message


class EchoCommand(CommandHandler):
    """Test handler returning its arguments."""

    def __init__(self, name="echo", hidden=False):
        self._name = name
        self._hidden = hidden

    @property
    def definition(self) -> CommandDefinition:
        return CommandDefinition(name=self._name, description="Echo", hidden=self._hidden)

    async def handle(self, message, args, context) -> CommandResult:
        return CommandResult(response=f"echo:{args}")


def _message(content):
    return Message(id="1", channel="telegram", session_key="telegram:1", user_id="1", content=content)


@pytest.fixture
def router():
    r = CommandRouter()
    r.register(EchoCommand())
    r.register(EchoCommand("secret", hidden=True))
    return r


class TestCommandRouter:
    """Tests for CommandRouter."""

    @pytest.mark.asyncio
    async def test_routes_with_args(self, router):
        """Test a command reaches its handler with arguments."""
        result = await router.route(_message("/echo hello world"), MagicMock())

        assert result.response == "echo:hello world"

    @pytest.mark.asyncio
    async def test_strips_bot_mention_and_case(self, router):
        """Test /Echo@SomeBot routes to echo."""
        result = await router.route(_message("/Echo@TaskBot hi"), MagicMock())

        assert result.response == "echo:hi"

    @pytest.mark.asyncio
    async def test_unknown_command(self, router):
        """Test unknown commands return None."""
        assert await router.route(_message("/nope"), MagicMock()) is None

    @pytest.mark.asyncio
    async def test_plain_text_not_routed(self, router):
        """Test non-command messages return None."""
        assert await router.route(_message("hello"), MagicMock()) is None

    def test_list_commands_hides_hidden(self, router):
        """Test hidden commands are listed only on request."""
        assert [c.name for c in router.list_commands()] == ["echo"]
        assert sorted(c.name for c in router.list_commands(include_hidden=True)) == ["echo", "secret"]

    def test_get_handler(self, router):
        """Test handlers are looked up by name."""
        assert router.get_handler("echo") is not None
        assert router.get_handler("missing") is None
