"""Domain models for the per-user task wizard session.

The wizard state is a small tagged union: one frozen dataclass per state,
each carrying only the context that state needs. Single-task states and
batch states are distinct types so a batch prompt can never be mistaken for
the single-task one. ``step`` keeps the numeric tag (0-9) for logging.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import ClassVar

from taskbot.model.task import Member, ProjectRef, ResolvedTask, TodoList


@dataclass(frozen=True)
class Idle:
    step: ClassVar[int] = 0


@dataclass(frozen=True)
class AwaitingIntent:
    step: ClassVar[int] = 1


@dataclass(frozen=True)
class Confirming:
    step: ClassVar[int] = 2


@dataclass(frozen=True)
class SelectingProject:
    step: ClassVar[int] = 3
    page: int = 0


@dataclass(frozen=True)
class SelectingTodoList:
    step: ClassVar[int] = 4
    page: int = 0


@dataclass(frozen=True)
class SelectingAssignee:
    step: ClassVar[int] = 5
    page: int = 0
    showing_all: bool = False


@dataclass(frozen=True)
class AwaitingDueDate:
    step: ClassVar[int] = 6


@dataclass(frozen=True)
class BatchSelectingProject:
    step: ClassVar[int] = 7
    entry: int = 0
    page: int = 0


@dataclass(frozen=True)
class BatchSelectingTodoList:
    step: ClassVar[int] = 8
    entry: int = 0
    page: int = 0


@dataclass(frozen=True)
class BatchAwaitingDueDate:
    step: ClassVar[int] = 9
    entry: int = 0


WizardState = (
    Idle
    | AwaitingIntent
    | Confirming
    | SelectingProject
    | SelectingTodoList
    | SelectingAssignee
    | AwaitingDueDate
    | BatchSelectingProject
    | BatchSelectingTodoList
    | BatchAwaitingDueDate
)

BATCH_STATES = (BatchSelectingProject, BatchSelectingTodoList, BatchAwaitingDueDate)

# Missing-field names recorded per pending batch task
FIELD_PROJECT = "project"
FIELD_TODO_LIST = "todo_list"
FIELD_DUE_DATE = "due_date"


@dataclass
class Selections:
    """Everything collected so far for a single-task wizard run."""

    title: str | None = None
    description: str | None = None
    project_id: str | None = None
    todo_list_id: str | None = None
    assignee_id: str | None = None
    assignee_email: str | None = None
    chat_user_id: str | None = None
    due_on: date | None = None
    due_resolved: bool = False
    assignee_decided: bool = False
    original_message: str | None = None

    def is_empty(self) -> bool:
        return self == Selections()

    @classmethod
    def from_resolved(cls, task: ResolvedTask, original_message: str) -> "Selections":
        return cls(
            title=task.title,
            description=task.description,
            project_id=task.project_id,
            todo_list_id=task.todo_list_id,
            assignee_id=task.assignee_id,
            assignee_email=task.assignee_email,
            chat_user_id=task.chat_user_id,
            due_on=task.due_on,
            due_resolved=task.due_resolved,
            assignee_decided=task.assignee_id is not None,
            original_message=original_message,
        )


@dataclass
class PendingInfo:
    """A batch task that still needs input, and which fields are missing."""

    task_index: int
    missing_fields: list[str] = field(default_factory=list)


@dataclass
class Listings:
    """Picker contents cached for pagination re-renders."""

    projects: list[ProjectRef] = field(default_factory=list)
    todo_lists: list[TodoList] = field(default_factory=list)
    people: list[Member] = field(default_factory=list)


@dataclass
class Session:
    """One user's wizard session.

    Created lazily on the user's first message, mutated only by the
    conversation engine, and reset on cancel, completion or error. Not
    persisted across restarts.
    """

    user_id: str
    session_key: str = ""
    state: WizardState = field(default_factory=Idle)
    selections: Selections = field(default_factory=Selections)
    ui_messages: dict[str, list[str]] = field(default_factory=dict)
    batch_tasks: list[ResolvedTask] = field(default_factory=list)
    batch_needing_info: list[PendingInfo] = field(default_factory=list)
    current_batch_index: int = 0
    listings: Listings = field(default_factory=Listings)
    generation: int = 0

    @property
    def step(self) -> int:
        return self.state.step

    @property
    def is_active(self) -> bool:
        return not isinstance(self.state, Idle)

    @property
    def in_batch(self) -> bool:
        return isinstance(self.state, BATCH_STATES)

    def track_ui(self, purpose: str, message_id: str | None) -> None:
        """Remember an interactive message so it can be deleted later."""
        if message_id is not None:
            self.ui_messages.setdefault(purpose, []).append(message_id)

    def take_ui(self, purpose: str | None = None) -> list[str]:
        """Pop tracked message ids for one purpose, or all of them."""
        if purpose is not None:
            return self.ui_messages.pop(purpose, [])
        ids = [mid for mids in self.ui_messages.values() for mid in mids]
        self.ui_messages.clear()
        return ids

    def reset(self) -> None:
        """Return to Idle with nothing selected.

        Bumps ``generation`` so that work started before the reset can tell
        its result is stale.
        """
        self.state = Idle()
        self.selections = Selections()
        self.ui_messages = {}
        self.batch_tasks = []
        self.batch_needing_info = []
        self.current_batch_index = 0
        self.listings = Listings()
        self.generation += 1
