"""Inline keyboards and callback data for the task wizard.

Callback data is a flat string: ``project_<id>``, ``project_page_<n>``,
``list_<id>``, ``list_page_<n>``, ``person_<id>``, ``person_none``,
``person_page_<n>``, ``confirm_task`` and ``rewrite_task``.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass

from taskbot.model.message import Button, Keyboard
from taskbot.model.task import Member, ProjectRef, TodoList

PROJECTS_PER_PAGE = 8
TODO_LISTS_PER_PAGE = 8
PEOPLE_PER_PAGE = 7

CONFIRM_TASK = "confirm_task"
REWRITE_TASK = "rewrite_task"
PERSON_NONE = "person_none"

_CALLBACK = re.compile(r"^(project|list|person)_(?:(page)_(\d+)|(.+))$")


@dataclass(frozen=True)
class Callback:
    """Parsed callback data.

    Attributes:
        action: "confirm", "rewrite", "project", "list" or "person".
        value: Selected id (None for confirm, rewrite and "no assignee").
        page: Requested page for pagination callbacks, else None.
    """

    action: str
    value: str | None = None
    page: int | None = None

    @property
    def is_page(self) -> bool:
        return self.page is not None


def parse_callback(data: str) -> Callback | None:
    """Parse button callback data; unknown data returns None."""
    if data == CONFIRM_TASK:
        return Callback("confirm")
    if data == REWRITE_TASK:
        return Callback("rewrite")
    if data == PERSON_NONE:
        return Callback("person")

    match = _CALLBACK.match(data)
    if not match:
        return None
    action, page_marker, page, value = match.groups()
    if page_marker:
        return Callback(action, page=int(page))
    return Callback(action, value=value)


def page_count(total: int, per_page: int) -> int:
    return max(1, (total + per_page - 1) // per_page)


def clamp_page(page: int, total: int, per_page: int) -> int:
    return min(max(page, 0), page_count(total, per_page) - 1)


def _paginated(
    items: Sequence[tuple[str, str]],
    page: int,
    per_page: int,
    prefix: str,
) -> Keyboard:
    page = clamp_page(page, len(items), per_page)
    start = page * per_page
    rows: Keyboard = [[Button(label, f"{prefix}_{item_id}")] for item_id, label in items[start : start + per_page]]

    nav: list[Button] = []
    if page > 0:
        nav.append(Button("⬅️ Previous", f"{prefix}_page_{page - 1}"))
    if start + per_page < len(items):
        nav.append(Button("Next ➡️", f"{prefix}_page_{page + 1}"))
    if nav:
        rows.append(nav)
    return rows


def confirm_keyboard() -> Keyboard:
    return [[Button("✅ Confirm", CONFIRM_TASK), Button("✏️ Rewrite", REWRITE_TASK)]]


def project_keyboard(projects: Sequence[ProjectRef], page: int = 0) -> Keyboard:
    return _paginated([(p.id, p.name) for p in projects], page, PROJECTS_PER_PAGE, "project")


def todo_list_keyboard(todo_lists: Sequence[TodoList], page: int = 0) -> Keyboard:
    return _paginated([(t.id, t.name) for t in todo_lists], page, TODO_LISTS_PER_PAGE, "list")


def person_keyboard(people: Sequence[Member], page: int = 0) -> Keyboard:
    """People picker with a leading "No assignee" choice."""
    rows = _paginated([(p.id, p.name) for p in people], page, PEOPLE_PER_PAGE, "person")
    return [[Button("🚫 No assignee", PERSON_NONE)]] + rows
