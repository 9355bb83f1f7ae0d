"""Slack delivery for task notifications."""

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any, TypeVar

import aiohttp
from slack_sdk.errors import SlackClientError
from slack_sdk.web.async_client import AsyncWebClient

from taskbot.core.errors import NotificationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_SEND_ERRORS = (SlackClientError, aiohttp.ClientError, asyncio.TimeoutError)


class NotificationDispatcher:
    """Posts to channels, direct messages and thread replies on Slack.

    Every method returns the Slack ``ts`` of the posted message, an opaque
    token that can be stored and replayed later as ``thread_ts``. Failures are
    raised as ``NotificationError``; see ``notify_safely`` for the log and
    swallow wrapper the rest of the bot uses.
    """

    def __init__(self, client: AsyncWebClient):
        self._client = client

    async def _post(
        self,
        channel: str,
        text: str,
        blocks: list[dict[str, Any]] | None,
        thread_ts: str | None = None,
    ) -> str:
        kwargs: dict[str, Any] = {"channel": channel, "text": text}
        if blocks:
            kwargs["blocks"] = blocks
        if thread_ts:
            kwargs["thread_ts"] = thread_ts
        try:
            response = await self._client.chat_postMessage(**kwargs)
        except _SEND_ERRORS as e:
            raise NotificationError(f"Slack post to {channel} failed: {e}") from e
        return str(response["ts"])

    async def post_to_channel(self, channel_id: str, text: str, blocks: list[dict[str, Any]] | None = None) -> str:
        ts = await self._post(channel_id, text, blocks)
        logger.info(f"Posted to Slack channel {channel_id} (ts={ts})")
        return ts

    async def send_direct_message(self, user_id: str, text: str, blocks: list[dict[str, Any]] | None = None) -> str:
        """Open (or reuse) the DM channel with ``user_id`` and post there."""
        try:
            opened = await self._client.conversations_open(users=user_id)
        except _SEND_ERRORS as e:
            raise NotificationError(f"Could not open DM with {user_id}: {e}") from e
        channel_id = opened["channel"]["id"]
        ts = await self._post(channel_id, text, blocks)
        logger.info(f"Sent Slack DM to {user_id}")
        return ts

    async def reply_in_thread(
        self,
        channel_id: str,
        thread_ts: str,
        text: str,
        blocks: list[dict[str, Any]] | None = None,
    ) -> str:
        ts = await self._post(channel_id, text, blocks, thread_ts=thread_ts)
        logger.info(f"Replied in Slack thread {channel_id}/{thread_ts}")
        return ts


async def notify_safely(send: Awaitable[T], description: str) -> T | None:
    """Await a notification send, logging and swallowing ``NotificationError``.

    Returns:
        The send's result, or None if it failed.
    """
    try:
        return await send
    except NotificationError as e:
        logger.warning(f"Notification failed ({description}): {e}")
        return None
