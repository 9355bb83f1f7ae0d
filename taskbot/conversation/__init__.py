"""Task wizard: session store, keyboards, creation pipeline and engine."""

from taskbot.conversation.engine import ConversationEngine
from taskbot.conversation.pipeline import (
    CreationOutcome,
    CreationRequest,
    create_batch,
    create_work_item,
    format_batch_summary,
    notify_assignees,
)
from taskbot.conversation.store import SessionStore

__all__ = [
    "ConversationEngine",
    "CreationOutcome",
    "CreationRequest",
    "SessionStore",
    "create_batch",
    "create_work_item",
    "format_batch_summary",
    "notify_assignees",
]
