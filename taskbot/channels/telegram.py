"""Telegram channel adapter using python-telegram-bot."""

import logging
import os
from datetime import UTC, datetime
from typing import Any

from telegram import BotCommand, InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.error import TelegramError
from telegram.ext import Application, CallbackQueryHandler, ContextTypes, MessageHandler, filters

from taskbot.channels.base import ButtonCallback, ChannelAdapter, MessageCallback
from taskbot.model.message import ButtonPress, Keyboard, Message, MessageDirection

logger = logging.getLogger(__name__)


def to_markup(keyboard: Keyboard) -> InlineKeyboardMarkup:
    """Convert a channel-neutral keyboard to Telegram's inline markup."""
    return InlineKeyboardMarkup(
        [[InlineKeyboardButton(button.text, callback_data=button.data) for button in row] for row in keyboard]
    )


class TelegramChannel(ChannelAdapter):
    """Telegram channel adapter.

    Handles:
    - Bot initialization and lifecycle
    - Message and callback-query conversion
    - User allowlisting
    """

    name = "telegram"

    # Telegram maximum message length
    MAX_MESSAGE_LENGTH = 4096

    def __init__(
        self,
        token: str | None = None,
        allowed_users: list[int] | None = None,
        allow_all: bool = False,
    ):
        """Initialize the Telegram channel.

        Args:
            token: Bot token (falls back to TELEGRAM_BOT_TOKEN env var).
            allowed_users: List of allowed user IDs.
            allow_all: If True, allow all users (insecure). If False, requires an allowlist.
        """
        resolved_token = token or os.environ.get("TELEGRAM_BOT_TOKEN")
        if not resolved_token:
            raise ValueError("Telegram bot token required (pass token or set TELEGRAM_BOT_TOKEN)")
        self.token: str = resolved_token

        self.allowed_users = set(allowed_users or [])
        self.allow_all = allow_all
        self._app: Application | None = None  # type: ignore[type-arg]
        self._message_callback: MessageCallback | None = None
        self._button_callback: ButtonCallback | None = None

    async def start(self) -> None:
        """Start the Telegram bot."""
        self._app = Application.builder().token(self.token).build()

        # Button presses first, then commands and plain text
        self._app.add_handler(CallbackQueryHandler(self._handle_callback_query))
        self._app.add_handler(MessageHandler(filters.COMMAND, self._handle_command))
        self._app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, self._handle_message))

        await self._app.initialize()
        await self._app.start()
        await self._app.updater.start_polling()  # type: ignore[union-attr]

        logger.info("Telegram channel started")

    async def stop(self) -> None:
        """Stop the Telegram bot."""
        if self._app:
            await self._app.updater.stop()  # type: ignore[union-attr]
            await self._app.stop()
            await self._app.shutdown()
            logger.info("Telegram channel stopped")

    def on_message(self, callback: MessageCallback) -> None:
        """Register callback for incoming messages."""
        self._message_callback = callback

    def on_button(self, callback: ButtonCallback) -> None:
        """Register callback for inline-button presses."""
        self._button_callback = callback

    @staticmethod
    def _chat_id(session_key: str) -> int:
        return int(session_key.split(":")[1])

    async def send_message(
        self,
        session_key: str,
        content: str,
        keyboard: Keyboard | None = None,
        **kwargs: Any,
    ) -> Message:
        """Send a plain-text message to a Telegram chat.

        Messages over Telegram's 4096-char limit are split at paragraph
        boundaries; the keyboard is attached to the last chunk.

        Args:
            session_key: Session key in format 'telegram:chat_id'.
            content: Message text.
            keyboard: Optional inline keyboard.
            **kwargs: Additional telegram.Bot.send_message kwargs.

        Returns:
            The sent Message object (last chunk if split).
        """
        if not self._app:
            raise RuntimeError("Telegram channel not started")

        chat_id = self._chat_id(session_key)
        chunks = self._split_message(content)
        sent = None
        for index, chunk in enumerate(chunks):
            markup = to_markup(keyboard) if keyboard and index == len(chunks) - 1 else None
            sent = await self._app.bot.send_message(chat_id=chat_id, text=chunk, reply_markup=markup, **kwargs)

        if not sent:
            raise RuntimeError("Failed to send message: no chunks were sent")

        return Message(
            id=str(sent.message_id),
            channel=self.name,
            session_key=session_key,
            user_id=str(self._app.bot.id),
            content=content,
            direction=MessageDirection.OUTBOUND,
            timestamp=datetime.now(UTC),
        )

    async def delete_message(self, session_key: str, message_id: str) -> None:
        """Delete a message; already-deleted or too-old messages are only logged."""
        if not self._app:
            return
        try:
            await self._app.bot.delete_message(chat_id=self._chat_id(session_key), message_id=int(message_id))
        except TelegramError as e:
            logger.debug(f"Could not delete message {message_id} in {session_key}: {e}")

    async def register_commands(self, commands: list[Any]) -> None:
        """Publish command hints to Telegram's command menu."""
        if not self._app:
            return
        bot_commands = [BotCommand(cmd.name, cmd.description) for cmd in commands]
        await self._app.bot.set_my_commands(bot_commands)
        logger.info(f"Registered {len(bot_commands)} Telegram commands")

    def _split_message(self, text: str) -> list[str]:
        """Split text into chunks that fit Telegram's message limit.

        Tries to break at paragraph boundaries (double newline), falls back
        to single newlines, then hard-splits as a last resort.
        """
        if len(text) <= self.MAX_MESSAGE_LENGTH:
            return [text]

        chunks: list[str] = []
        remaining = text

        while remaining:
            if len(remaining) <= self.MAX_MESSAGE_LENGTH:
                chunks.append(remaining)
                break

            split_at = remaining.rfind("\n\n", 0, self.MAX_MESSAGE_LENGTH)
            if split_at == -1:
                split_at = remaining.rfind("\n", 0, self.MAX_MESSAGE_LENGTH)
            if split_at == -1:
                split_at = self.MAX_MESSAGE_LENGTH

            chunks.append(remaining[:split_at])
            remaining = remaining[split_at:].lstrip("\n")

        return chunks

    def _is_allowed(self, update: Update) -> bool:
        """Check if the sender is allowed.

        Security model:
        - If allow_all is True, all users are allowed (insecure)
        - Otherwise the user must be in allowed_users
        - With no allowlist and allow_all off, deny by default
        """
        if not update.effective_user:
            return False
        if self.allow_all:
            return True
        return update.effective_user.id in self.allowed_users

    def _to_message(self, update: Update) -> Message | None:
        """Convert Telegram update to unified Message format."""
        if not update.message or not update.effective_user or not update.effective_chat:
            return None

        return Message(
            id=str(update.message.message_id),
            channel=self.name,
            session_key=self.build_session_key(update.effective_chat.id),
            user_id=str(update.effective_user.id),
            content=update.message.text or "",
            direction=MessageDirection.INBOUND,
            timestamp=update.message.date or datetime.now(UTC),
            reply_to_id=str(update.message.reply_to_message.message_id) if update.message.reply_to_message else None,
            metadata={
                "chat_type": update.effective_chat.type,
                "username": update.effective_user.username,
                "first_name": update.effective_user.first_name,
            },
        )

    async def _send_unauthorized_response(self, update: Update) -> None:
        """Tell an unauthorized user their ID so an admin can allowlist them."""
        if not update.message or not update.effective_user:
            return

        user_id = update.effective_user.id
        await update.message.reply_text(
            f"⛔ Access denied.\n\nYour user ID: {user_id}\n"
            f"Ask an admin to add it to telegram.allowed_users in config.yaml."
        )
        logger.warning(f"Blocked user {user_id}")

    async def _handle_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle incoming text messages."""
        if not self._is_allowed(update):
            await self._send_unauthorized_response(update)
            return

        message = self._to_message(update)
        if message and self._message_callback:
            await self._message_callback(message)

    async def _handle_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle incoming commands."""
        if not self._is_allowed(update):
            await self._send_unauthorized_response(update)
            return

        message = self._to_message(update)
        if message and self._message_callback:
            await self._message_callback(message)

    async def _handle_callback_query(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle inline keyboard button presses."""
        query = update.callback_query
        if not query or not query.data:
            return

        await query.answer()  # Acknowledge the button press

        if not self._is_allowed(update):
            logger.warning(f"Ignoring button press from unauthorized user {update.effective_user}")
            return

        chat = update.effective_chat
        if chat is None or update.effective_user is None:
            return

        press = ButtonPress(
            session_key=self.build_session_key(chat.id),
            user_id=str(update.effective_user.id),
            data=query.data,
            message_id=str(query.message.message_id) if query.message else None,
        )
        if self._button_callback:
            await self._button_callback(press)
