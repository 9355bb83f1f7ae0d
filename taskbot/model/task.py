"""Domain models for task intents, directory entities and work items.

External identifiers are strings everywhere in this module. Gateways and the
directory normalise ids with ``str()`` when records enter the system so that
comparisons further in never have to care whether an upstream API sent a
number or a string.
"""

from dataclasses import dataclass, field
from datetime import date


@dataclass
class TaskIntent:
    """One task as extracted from free text, before any id resolution.

    Attributes:
        title: Short actionable title (non-empty after validation).
        description: Full description (non-empty after validation).
        project_name: Project name as written or matched by the model.
        assignee_names: Names as written; only the first is resolved.
        due_date_expression: Raw due date text ("tomorrow", "2025-10-12").
    """

    title: str
    description: str
    project_name: str | None = None
    assignee_names: list[str] = field(default_factory=list)
    due_date_expression: str | None = None


@dataclass
class IntentBatch:
    """Result of one extraction: a single intent or several."""

    tasks: list[TaskIntent]
    is_multi: bool = False
    from_fallback: bool = False

    @property
    def first(self) -> TaskIntent:
        return self.tasks[0]


@dataclass
class ResolvedTask:
    """A task whose names have been turned into ids (or explicitly left absent)."""

    title: str
    description: str
    project_id: str | None = None
    todo_list_id: str | None = None
    assignee_id: str | None = None
    assignee_email: str | None = None
    chat_user_id: str | None = None
    due_on: date | None = None
    # True once a due date was parsed or explicitly skipped
    due_resolved: bool = False


@dataclass
class Person:
    """A directory person record.

    Attributes:
        name: Display name.
        email: Email address (also the cross-system join key).
        chat_user_id: Slack user ID, if known.
        external_system_id: Basecamp person ID, if stored in the directory.
        availability_status: Free-form status ("available", "ooo", ...).
        record_id: Directory-internal record ID used for updates.
    """

    name: str
    email: str
    chat_user_id: str | None = None
    external_system_id: str | None = None
    availability_status: str | None = None
    record_id: str | None = None


@dataclass(frozen=True)
class ProjectRef:
    """A Basecamp project as listed by the API."""

    id: str
    name: str


@dataclass(frozen=True)
class TodoList:
    """A to-do list inside a project."""

    id: str
    name: str
    status: str | None = None


@dataclass(frozen=True)
class Member:
    """A Basecamp person (project member or workspace member)."""

    id: str
    name: str
    email: str | None = None


@dataclass
class WorkItem:
    """A created Basecamp to-do. Immutable once created; only re-read."""

    id: str
    title: str
    description: str
    url: str
    assignees: list[Member] = field(default_factory=list)
    due_on: date | None = None
    project_id: str | None = None
