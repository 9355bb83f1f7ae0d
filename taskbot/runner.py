"""Wires configuration, stores and services into a running bot."""

import logging

import httpx
from fastapi import FastAPI
from slack_sdk.web.async_client import AsyncWebClient

from taskbot.api.app import create_app
from taskbot.channels.base import ChannelAdapter
from taskbot.channels.commands.base import CommandContext
from taskbot.channels.commands.handlers import get_bot_commands
from taskbot.channels.commands.router import CommandRouter
from taskbot.channels.telegram import TelegramChannel
from taskbot.conversation.engine import ConversationEngine
from taskbot.conversation.store import SessionStore
from taskbot.core.config import Config
from taskbot.core.errors import DirectoryError
from taskbot.core.retry import RetryConfig
from taskbot.core.timezone import local_today
from taskbot.directory.airtable import AirtableDirectoryService
from taskbot.directory.cache import DirectoryCache
from taskbot.gateway.basecamp import BasecampGateway
from taskbot.gateway.oauth import BasecampOAuth
from taskbot.intent.extractor import IntentExtractor
from taskbot.intent.llm import LangChainCompletion, create_chat_model
from taskbot.model.message import Message
from taskbot.notifications.dispatcher import NotificationDispatcher
from taskbot.notifications.fanout import WebhookFanout
from taskbot.resolution.resolver import EntityResolver
from taskbot.stores.credentials import CredentialStore
from taskbot.stores.threads import TaskMessageStore

logger = logging.getLogger(__name__)

UNKNOWN_COMMAND = "Unknown command. Send /help to see what I can do."


class TaskBotRunner:
    """Owns every long-lived component of the bot.

    Telegram messages and commands come in through the channel, button
    presses go straight to the conversation engine, and the FastAPI app
    (served separately by uvicorn) receives Basecamp webhooks and OAuth
    callbacks.
    """

    def __init__(self, config: Config, channel: ChannelAdapter | None = None):
        """Build the component graph.

        Args:
            config: Loaded application configuration.
            channel: Chat channel; defaults to Telegram from config.
        """
        self.config = config
        self._http = httpx.AsyncClient(timeout=config.basecamp.timeout_seconds)

        self.credentials = CredentialStore(config.state_dir)
        self.threads = TaskMessageStore(config.state_dir)
        self.directory = DirectoryCache(
            AirtableDirectoryService(config.directory, self._http),
            ttl_seconds=config.directory.cache_ttl_seconds,
        )
        self.oauth = BasecampOAuth(config.basecamp, self._http)

        self.dispatcher: NotificationDispatcher | None = None
        self.fanout: WebhookFanout | None = None
        if config.slack.bot_token:
            self.dispatcher = NotificationDispatcher(AsyncWebClient(token=config.slack.bot_token))
            self.fanout = WebhookFanout(
                self.directory, self.dispatcher, self.threads, config.slack.default_channel_id
            )
        else:
            logger.warning("No Slack bot token configured, notifications disabled")

        extractor = IntentExtractor(
            LangChainCompletion(create_chat_model(config.llm)),
            RetryConfig(max_retries=config.llm.max_retries, base_delay=config.llm.base_delay_seconds),
            today=self._today,
        )

        self.channel = channel or TelegramChannel(
            token=config.telegram.token,
            allowed_users=config.telegram.allowed_users,
            allow_all=config.telegram.allow_all,
        )
        self.engine = ConversationEngine(
            channel=self.channel,
            sessions=SessionStore(),
            extractor=extractor,
            resolver=EntityResolver(),
            directory=self.directory,
            gateways=self.gateway_for,
            dispatcher=self.dispatcher,
            oauth=self.oauth,
            today=self._today,
        )

        self.command_router = CommandRouter()
        for handler in get_bot_commands():
            self.command_router.register(handler)

        self.channel.on_message(self._handle_inbound_message)
        self.channel.on_button(self.engine.handle_button)

        self.app: FastAPI = create_app(
            oauth=self.oauth,
            credentials=self.credentials,
            fanout=self.fanout,
            on_connected=self._on_connected,
        )

    def _today(self):
        return local_today(self.config.timezone)

    def gateway_for(self, user_id: str) -> BasecampGateway | None:
        """Basecamp gateway for a chat user, or None if they never connected."""
        credential = self.credentials.get(user_id)
        if credential is None:
            return None
        return BasecampGateway(credential, self._http, self.config.basecamp)

    async def _handle_inbound_message(self, message: Message) -> None:
        """Route commands to their handlers and everything else to the engine."""
        if message.is_command:
            context = CommandContext(
                channel=self.channel,
                engine=self.engine,
                directory=self.directory,
                command_router=self.command_router,
            )
            result = await self.command_router.route(message, context)
            if result is None:
                await self.channel.send_message(message.session_key, UNKNOWN_COMMAND)
                return
            if result.response:
                await self.channel.send_message(message.session_key, result.response)
            if result.handled:
                return

        await self.engine.handle_message(message)

    async def _on_connected(self, user_id: str) -> None:
        """Confirm a finished OAuth connect in the user's private chat."""
        session_key = self.channel.build_session_key(user_id)
        try:
            await self.channel.send_message(session_key, "✅ Basecamp connected! Send me a task to get started.")
        except Exception as e:
            logger.warning(f"Could not confirm Basecamp connection to user {user_id}: {e}")

    async def start(self) -> None:
        await self.channel.start()
        await self.channel.register_commands(self.command_router.list_commands())
        try:
            await self.directory.refresh()
        except DirectoryError as e:
            logger.warning(f"Directory not loaded at startup, will retry on first use: {e}")
        logger.info("taskbot started")

    async def stop(self) -> None:
        await self.channel.stop()
        await self._http.aclose()
        logger.info("taskbot stopped")
