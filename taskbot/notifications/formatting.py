"""Slack Block Kit builders for task notifications.

Each builder returns ``(text, blocks)``: ``text`` is the notification
fallback shown by clients that do not render blocks.
"""

from collections.abc import Sequence
from datetime import date
from typing import Any

from taskbot.core.timezone import format_due

Blocks = list[dict[str, Any]]


def mention(name: str, chat_user_id: str | None) -> str:
    """Slack mention when the chat id is known, plain name otherwise."""
    return f"<@{chat_user_id}>" if chat_user_id else name


def _header(text: str) -> dict[str, Any]:
    return {"type": "header", "text": {"type": "plain_text", "text": text, "emoji": True}}


def _section(text: str) -> dict[str, Any]:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


def _fields(*pairs: tuple[str, str]) -> dict[str, Any]:
    return {
        "type": "section",
        "fields": [{"type": "mrkdwn", "text": f"*{label}:*\n{value}"} for label, value in pairs],
    }


def _view_button(url: str, primary: bool = False) -> dict[str, Any]:
    button: dict[str, Any] = {
        "type": "button",
        "text": {"type": "plain_text", "text": "View in Basecamp", "emoji": True},
        "url": url,
    }
    if primary:
        button["style"] = "primary"
    return {"type": "actions", "elements": [button]}


def todo_created(
    title: str,
    description: str | None,
    project_name: str,
    due_on: date | None,
    assignees: Sequence[str],
    creator_name: str,
    url: str,
) -> tuple[str, Blocks]:
    assignee_text = ", ".join(assignees) if assignees else "Not assigned"
    blocks = [
        _header("🆕 New Task Created"),
        _section(f"*{title}*"),
        _section(description or "_No description provided_"),
        _fields(
            ("Project", project_name),
            ("Due Date", format_due(due_on)),
            ("Assigned to", assignee_text),
            ("Created by", creator_name),
        ),
    ]
    if url:
        blocks.append(_view_button(url, primary=True))
    return f"New task: {title}", blocks


def todo_completed(title: str, project_name: str, completer_name: str, url: str) -> tuple[str, Blocks]:
    blocks = [
        _header("✅ Task Completed"),
        _section(f"*{title}*"),
        _fields(("Project", project_name), ("Completed by", completer_name)),
    ]
    if url:
        blocks.append(_view_button(url))
    return f"Task completed: {title}", blocks


def comment_created(
    task_title: str,
    content: str | None,
    project_name: str,
    commenter_name: str,
    url: str,
) -> tuple[str, Blocks]:
    blocks = [
        _header("💬 New Comment"),
        _section(f"*On task:* {task_title}"),
        _section(content or "_No comment text_"),
        _fields(("Project", project_name), ("Commented by", commenter_name)),
    ]
    if url:
        blocks.append(_view_button(url))
    return f"New comment on {task_title}", blocks


def assignment_changed(title: str, assignees: Sequence[str], url: str) -> tuple[str, Blocks]:
    assignee_text = ", ".join(assignees) if assignees else "nobody"
    blocks = [_section(f"👤 *{title}* is now assigned to {assignee_text}")]
    if url:
        blocks.append(_view_button(url))
    return f"{title} is now assigned to {assignee_text}", blocks


def assigned_to_you(
    title: str,
    description: str | None,
    project_name: str | None,
    due_on: date | None,
    url: str,
    assigned_by: str | None = None,
) -> tuple[str, Blocks]:
    """Direct message telling someone a task was assigned to them."""
    pairs = [("Due Date", format_due(due_on))]
    if project_name:
        pairs.insert(0, ("Project", project_name))
    if assigned_by:
        pairs.append(("Assigned by", assigned_by))

    blocks = [
        _section(f"📌 You've been assigned a new task: *{title}*"),
    ]
    if description:
        blocks.append(_section(description))
    blocks.append(_fields(*pairs))
    if url:
        blocks.append(_view_button(url, primary=True))
    return f"You've been assigned: {title}", blocks
