"""Tests for the Telegram channel adapter."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram import InlineKeyboardMarkup
from telegram.error import TelegramError

from taskbot.channels.commands.base import CommandDefinition
from taskbot.channels.telegram import TelegramChannel, to_markup
from taskbot.model.message import Button


@pytest.fixture
def channel():
    """Telegram channel with a mocked application."""
    ch = TelegramChannel(token="123:abc", allowed_users=[42])
    ch._app = MagicMock()
    ch._app.bot.id = 999
    ch._app.bot.send_message = AsyncMock(side_effect=lambda **kw: MagicMock(message_id=len(kw["text"])))
    ch._app.bot.delete_message = AsyncMock()
    ch._app.bot.set_my_commands = AsyncMock()
    return ch


def _update(user_id=42, chat_id=42, text="hello", callback_data=None):
    update = MagicMock()
    update.effective_user.id = user_id
    update.effective_user.username = "sarah"
    update.effective_user.first_name = "Sarah"
    update.effective_chat.id = chat_id
    update.effective_chat.type = "private"
    update.message.message_id = 5
    update.message.text = text
    update.message.reply_to_message = None
    update.message.reply_text = AsyncMock()
    if callback_data is None:
        update.callback_query = None
    else:
        update.callback_query.data = callback_data
        update.callback_query.answer = AsyncMock()
        update.callback_query.message.message_id = 77
    return update


class TestConstruction:
    """Tests for token handling."""

    def test_requires_token(self, monkeypatch):
        """Test a missing token is rejected."""
        monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)

        with pytest.raises(ValueError):
            TelegramChannel()

    def test_token_from_env(self, monkeypatch):
        """Test the token falls back to the environment."""
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "env-token")

        assert TelegramChannel().token == "env-token"


class TestSending:
    """Tests for outbound messages."""

    def test_to_markup(self):
        """Test keyboards map to inline markup row by row."""
        markup = to_markup([[Button("A", "a"), Button("B", "b")], [Button("C", "c")]])

        assert isinstance(markup, InlineKeyboardMarkup)
        assert [[b.callback_data for b in row] for row in markup.inline_keyboard] == [["a", "b"], ["c"]]

    @pytest.mark.asyncio
    async def test_send_with_keyboard(self, channel):
        """Test a short message is sent once with the keyboard."""
        sent = await channel.send_message("telegram:42", "pick one", keyboard=[[Button("A", "a")]])

        kwargs = channel._app.bot.send_message.await_args.kwargs
        assert kwargs["chat_id"] == 42
        assert kwargs["text"] == "pick one"
        assert isinstance(kwargs["reply_markup"], InlineKeyboardMarkup)
        assert sent.id == str(len("pick one"))
        assert sent.session_key == "telegram:42"

    @pytest.mark.asyncio
    async def test_long_message_split_keyboard_on_last(self, channel):
        """Test long text is split and only the last chunk carries buttons."""
        text = ("a" * 3000) + "\n\n" + ("b" * 3000)

        await channel.send_message("telegram:42", text, keyboard=[[Button("A", "a")]])

        calls = channel._app.bot.send_message.await_args_list
        assert len(calls) == 2
        assert calls[0].kwargs["reply_markup"] is None
        assert calls[1].kwargs["reply_markup"] is not None
        assert calls[1].kwargs["text"] == "b" * 3000

    def test_split_hard_limit(self, channel):
        """Test text without newlines is hard-split at the limit."""
        chunks = channel._split_message("x" * 9000)

        assert [len(c) for c in chunks] == [4096, 4096, 808]

    @pytest.mark.asyncio
    async def test_send_before_start(self):
        """Test sending before start raises."""
        with pytest.raises(RuntimeError):
            await TelegramChannel(token="t").send_message("telegram:1", "hi")

    @pytest.mark.asyncio
    async def test_delete_errors_are_swallowed(self, channel):
        """Test failed deletes (already gone, too old) don't raise."""
        channel._app.bot.delete_message.side_effect = TelegramError("message to delete not found")

        await channel.delete_message("telegram:42", "5")

        channel._app.bot.delete_message.assert_awaited_once_with(chat_id=42, message_id=5)

    @pytest.mark.asyncio
    async def test_register_commands(self, channel):
        """Test command hints are published."""
        await channel.register_commands([CommandDefinition(name="task", description="Create a task")])

        commands = channel._app.bot.set_my_commands.await_args.args[0]
        assert commands[0].command == "task"


class TestInbound:
    """Tests for inbound updates."""

    @pytest.mark.asyncio
    async def test_allowed_message_delivered(self, channel):
        """Test allowlisted users' messages reach the callback."""
        callback = AsyncMock()
        channel.on_message(callback)

        await channel._handle_message(_update(text="fix login"), MagicMock())

        message = callback.await_args.args[0]
        assert message.content == "fix login"
        assert message.user_id == "42"
        assert message.session_key == "telegram:42"

    @pytest.mark.asyncio
    async def test_unauthorized_user_blocked(self, channel):
        """Test unknown users are told their id and not forwarded."""
        callback = AsyncMock()
        channel.on_message(callback)
        update = _update(user_id=7)

        await channel._handle_command(update, MagicMock())

        callback.assert_not_awaited()
        assert "7" in update.message.reply_text.await_args.args[0]

    @pytest.mark.asyncio
    async def test_allow_all(self):
        """Test allow_all admits everyone."""
        channel = TelegramChannel(token="t", allow_all=True)

        assert channel._is_allowed(_update(user_id=12345)) is True

    @pytest.mark.asyncio
    async def test_button_press_delivered(self, channel):
        """Test callback queries are acknowledged and forwarded."""
        callback = AsyncMock()
        channel.on_button(callback)
        update = _update(callback_data="project_100")

        await channel._handle_callback_query(update, MagicMock())

        update.callback_query.answer.assert_awaited_once()
        press = callback.await_args.args[0]
        assert press.data == "project_100"
        assert press.user_id == "42"
        assert press.session_key == "telegram:42"
        assert press.message_id == "77"

    @pytest.mark.asyncio
    async def test_unauthorized_button_ignored(self, channel):
        """Test button presses from unknown users are answered but dropped."""
        callback = AsyncMock()
        channel.on_button(callback)
        update = _update(user_id=7, callback_data="confirm_task")

        await channel._handle_callback_query(update, MagicMock())

        update.callback_query.answer.assert_awaited_once()
        callback.assert_not_awaited()
