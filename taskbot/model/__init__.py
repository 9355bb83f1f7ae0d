"""taskbot domain models - pure business entities.

Stable dataclasses and enums with no dependencies on infrastructure or
application logic.
"""

from taskbot.model.credential import UserCredential
from taskbot.model.message import Button, ButtonPress, Keyboard, Message, MessageDirection
from taskbot.model.session import (
    AwaitingDueDate,
    AwaitingIntent,
    BatchAwaitingDueDate,
    BatchSelectingProject,
    BatchSelectingTodoList,
    Confirming,
    Idle,
    PendingInfo,
    SelectingAssignee,
    SelectingProject,
    SelectingTodoList,
    Selections,
    Session,
    WizardState,
)
from taskbot.model.task import (
    IntentBatch,
    Member,
    Person,
    ProjectRef,
    ResolvedTask,
    TaskIntent,
    TodoList,
    WorkItem,
)

__all__ = [
    # Message
    "Button",
    "ButtonPress",
    "Keyboard",
    "Message",
    "MessageDirection",
    # Task
    "IntentBatch",
    "Member",
    "Person",
    "ProjectRef",
    "ResolvedTask",
    "TaskIntent",
    "TodoList",
    "WorkItem",
    # Session
    "AwaitingDueDate",
    "AwaitingIntent",
    "BatchAwaitingDueDate",
    "BatchSelectingProject",
    "BatchSelectingTodoList",
    "Confirming",
    "Idle",
    "PendingInfo",
    "SelectingAssignee",
    "SelectingProject",
    "SelectingTodoList",
    "Selections",
    "Session",
    "WizardState",
    # Credentials
    "UserCredential",
]
