"""Fan-out of Basecamp webhook events to Slack.

Basecamp posts one JSON payload per event::

    {"kind": "todo_created",
     "recording": {"id": 1, "title": "...", "app_url": "...",
                   "bucket": {"id": 2, "name": "Website"},
                   "parent": {"id": 3, "title": "...", "type": "Todo"},
                   "assignees": [...], "due_on": "2025-10-12"},
     "creator": {"id": 4, "name": "Sarah", "email_address": "..."}}

Channels come from the directory's project mapping, then the configured
default channel; with neither, the event is skipped.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from taskbot.core.errors import DirectoryError
from taskbot.directory.cache import DirectoryCache
from taskbot.model.task import Member
from taskbot.notifications import formatting
from taskbot.notifications.dispatcher import NotificationDispatcher, notify_safely
from taskbot.stores.threads import TaskMessageStore

logger = logging.getLogger(__name__)

TODO_CREATED = "todo_created"
TODO_ASSIGNMENT_CHANGED = "todo_assignment_changed"
TODO_COMPLETED = "todo_completed"
COMMENT_CREATED = "comment_created"

HANDLED_KINDS = (TODO_CREATED, TODO_ASSIGNMENT_CHANGED, TODO_COMPLETED, COMMENT_CREATED)


def _member(raw: dict[str, Any] | None) -> Member | None:
    if not raw or raw.get("id") is None:
        return None
    return Member(id=str(raw["id"]), name=raw.get("name") or "", email=raw.get("email_address"))


def _date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


@dataclass
class WebhookEvent:
    """The parts of a Basecamp webhook payload the fan-out uses."""

    kind: str
    recording_id: str
    title: str
    url: str
    project_id: str | None = None
    project_name: str = "Unknown project"
    description: str | None = None
    content: str | None = None
    parent_id: str | None = None
    parent_title: str | None = None
    assignees: list[Member] = field(default_factory=list)
    creator: Member | None = None
    due_on: date | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "WebhookEvent":
        recording = payload.get("recording") or {}
        bucket = recording.get("bucket") or {}
        parent = recording.get("parent") or {}
        return cls(
            kind=payload.get("kind", ""),
            recording_id=str(recording.get("id", "")),
            title=recording.get("title") or recording.get("content") or "Untitled",
            url=recording.get("app_url") or "",
            project_id=str(bucket["id"]) if bucket.get("id") is not None else None,
            project_name=bucket.get("name") or "Unknown project",
            description=recording.get("description"),
            content=recording.get("content"),
            parent_id=str(parent["id"]) if parent.get("id") is not None else None,
            parent_title=parent.get("title"),
            assignees=[m for m in (_member(a) for a in recording.get("assignees") or []) if m],
            creator=_member(payload.get("creator")) or _member(recording.get("creator")),
            due_on=_date(recording.get("due_on")),
        )


class WebhookFanout:
    """Routes Basecamp lifecycle events to Slack channels, threads and DMs."""

    def __init__(
        self,
        directory: DirectoryCache,
        dispatcher: NotificationDispatcher,
        threads: TaskMessageStore,
        default_channel_id: str | None = None,
    ):
        self._directory = directory
        self._dispatcher = dispatcher
        self._threads = threads
        self._default_channel_id = default_channel_id

    async def handle(self, payload: dict[str, Any]) -> None:
        """Dispatch one webhook payload. Unknown kinds are ignored."""
        event = WebhookEvent.from_payload(payload)
        if event.kind not in HANDLED_KINDS:
            logger.debug(f"Ignoring Basecamp webhook kind '{event.kind}'")
            return

        logger.info(f"Basecamp webhook {event.kind} for recording {event.recording_id} (project {event.project_id})")
        if event.kind == TODO_CREATED:
            await self._todo_created(event)
        elif event.kind == TODO_ASSIGNMENT_CHANGED:
            await self._assignment_changed(event)
        elif event.kind == TODO_COMPLETED:
            await self._todo_completed(event)
        else:
            await self._comment_created(event)

    async def _channel_for(self, project_id: str | None) -> str | None:
        try:
            channel = await self._directory.channel_for_project(project_id)
        except DirectoryError as e:
            logger.warning(f"Directory unavailable for channel lookup: {e}")
            channel = None
        return channel or self._default_channel_id

    async def _chat_user_id(self, member: Member) -> str | None:
        try:
            return await self._directory.find_chat_user_id(member.id, member.email)
        except DirectoryError as e:
            logger.warning(f"Directory unavailable for {member.name}: {e}")
            return None

    async def _mention(self, member: Member | None) -> str:
        if member is None:
            return "Someone"
        return formatting.mention(member.name, await self._chat_user_id(member))

    async def _dm_assignees(self, event: WebhookEvent) -> None:
        assigned_by = event.creator.name if event.creator else None
        for assignee in event.assignees:
            chat_id = await self._chat_user_id(assignee)
            if not chat_id:
                logger.info(f"No Slack identity for assignee {assignee.name}, skipping DM")
                continue
            text, blocks = formatting.assigned_to_you(
                event.title, event.description, event.project_name, event.due_on, event.url, assigned_by
            )
            await notify_safely(
                self._dispatcher.send_direct_message(chat_id, text, blocks),
                f"assignment DM to {assignee.name}",
            )

    async def _todo_created(self, event: WebhookEvent) -> None:
        channel = await self._channel_for(event.project_id)
        if channel:
            assignees = [await self._mention(a) for a in event.assignees]
            text, blocks = formatting.todo_created(
                event.title,
                event.description,
                event.project_name,
                event.due_on,
                assignees,
                await self._mention(event.creator),
                event.url,
            )
            ts = await notify_safely(
                self._dispatcher.post_to_channel(channel, text, blocks),
                f"todo_created post for {event.recording_id}",
            )
            if ts:
                self._threads.remember(event.recording_id, channel, ts, event.project_id, event.title)
        else:
            logger.info(f"No Slack channel for project {event.project_id}, skipping post")

        await self._dm_assignees(event)

    async def _post_or_thread(self, task_id: str | None, text: str, blocks: list, project_id: str | None) -> None:
        ref = self._threads.lookup(task_id)
        if ref:
            await notify_safely(
                self._dispatcher.reply_in_thread(ref.channel_id, ref.message_ts, text, blocks),
                f"thread reply for task {task_id}",
            )
            return

        channel = await self._channel_for(project_id)
        if not channel:
            logger.info(f"No thread or channel for task {task_id}, skipping")
            return
        await notify_safely(
            self._dispatcher.post_to_channel(channel, text, blocks),
            f"channel post for task {task_id}",
        )

    async def _assignment_changed(self, event: WebhookEvent) -> None:
        await self._dm_assignees(event)
        assignees = [await self._mention(a) for a in event.assignees]
        text, blocks = formatting.assignment_changed(event.title, assignees, event.url)
        await self._post_or_thread(event.recording_id, text, blocks, event.project_id)

    async def _todo_completed(self, event: WebhookEvent) -> None:
        text, blocks = formatting.todo_completed(
            event.title, event.project_name, await self._mention(event.creator), event.url
        )
        await self._post_or_thread(event.recording_id, text, blocks, event.project_id)

    async def _comment_created(self, event: WebhookEvent) -> None:
        # A comment threads under its parent to-do, not under itself
        task_id = event.parent_id or event.recording_id
        task_title = event.parent_title or event.title
        text, blocks = formatting.comment_created(
            task_title, event.content, event.project_name, await self._mention(event.creator), event.url
        )
        await self._post_or_thread(task_id, text, blocks, event.project_id)
