"""Work item creation and assignee notification.

Creation is authoritative: once Basecamp has accepted a to-do, nothing that
happens afterwards (membership anomalies, Slack failures) turns the outcome
into a failure.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date

from taskbot.core.errors import DirectoryError, GatewayError
from taskbot.core.timezone import format_due
from taskbot.directory.cache import DirectoryCache
from taskbot.gateway.basecamp import BasecampGateway
from taskbot.model.task import ResolvedTask, WorkItem
from taskbot.notifications import formatting
from taskbot.notifications.dispatcher import NotificationDispatcher, notify_safely

logger = logging.getLogger(__name__)

NO_PROJECT_ERROR = "No project selected"
NO_TODO_LIST_ERROR = "No to-do list selected"


@dataclass
class CreationRequest:
    """Everything needed to create one to-do."""

    project_id: str
    todo_list_id: str
    title: str
    description: str
    assignee_id: str | None = None
    due_on: date | None = None


@dataclass
class CreationOutcome:
    """Result of one creation attempt.

    Attributes:
        title: Task title, as requested.
        work_item: The created to-do, or None on failure.
        error: Plain-language failure reason.
        warnings: Non-fatal anomalies (e.g. assignment did not stick).
    """

    title: str
    work_item: WorkItem | None = None
    error: str | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.work_item is not None


async def _verify_membership(gateway: BasecampGateway, project_id: str, assignee_id: str) -> None:
    """Log whether the assignee is a project member. Never blocks creation."""
    try:
        members = await gateway.list_project_members(project_id)
    except GatewayError as e:
        logger.warning(f"Could not verify membership of {assignee_id} in project {project_id}: {e}")
        return

    if any(m.id == assignee_id for m in members):
        logger.debug(f"Assignee {assignee_id} is a member of project {project_id}")
    else:
        logger.warning(
            f"Assignee {assignee_id} not found among {len(members)} members of project {project_id}; "
            f"creating anyway"
        )


async def create_work_item(gateway: BasecampGateway, request: CreationRequest) -> CreationOutcome:
    """Create one to-do.

    Args:
        gateway: Authenticated Basecamp gateway.
        request: The fully specified to-do.

    Returns:
        CreationOutcome with the created work item and any warnings.

    Raises:
        GatewayError: If Basecamp rejects the creation itself.
    """
    if request.assignee_id:
        await _verify_membership(gateway, request.project_id, request.assignee_id)

    work_item = await gateway.create_todo(
        request.project_id,
        request.todo_list_id,
        request.title,
        request.description,
        [request.assignee_id] if request.assignee_id else [],
        request.due_on,
    )
    outcome = CreationOutcome(title=request.title, work_item=work_item)

    if request.assignee_id and not work_item.assignees:
        warning = f"Assignee {request.assignee_id} was requested but the to-do came back unassigned"
        logger.warning(f"{warning} (to-do {work_item.id})")
        outcome.warnings.append(warning)

    logger.info(f"Created to-do {work_item.id}: {work_item.title} ({work_item.url})")
    return outcome


async def notify_assignees(
    work_item: WorkItem,
    directory: DirectoryCache,
    dispatcher: NotificationDispatcher,
    chat_user_id: str | None = None,
    project_name: str | None = None,
) -> int:
    """Direct-message each assignee of a freshly created to-do.

    A ``chat_user_id`` already resolved upstream is used as-is and skips the
    directory lookup, provided Basecamp reports the to-do as assigned. Otherwise each assignee is looked up by Basecamp id,
    then by email. Assignees without a Slack identity are skipped.

    Returns:
        Number of DMs successfully sent.
    """
    text, blocks = formatting.assigned_to_you(
        work_item.title, work_item.description, project_name, work_item.due_on, work_item.url
    )

    if not work_item.assignees:
        if chat_user_id:
            logger.info(f"To-do {work_item.id} came back unassigned, not notifying {chat_user_id}")
        return 0

    if chat_user_id:
        targets = [chat_user_id]
    else:
        targets = []
        for assignee in work_item.assignees:
            try:
                target = await directory.find_chat_user_id(assignee.id, assignee.email)
            except DirectoryError as e:
                logger.warning(f"Directory unavailable while notifying {assignee.name}: {e}")
                target = None
            if target:
                targets.append(target)
            else:
                logger.info(f"No Slack identity for {assignee.name} ({assignee.id}), skipping DM")

    sent = 0
    for target in targets:
        if await notify_safely(dispatcher.send_direct_message(target, text, blocks), f"DM to {target}"):
            sent += 1
    return sent


async def notify_created(
    work_item: WorkItem,
    directory: DirectoryCache,
    dispatcher: NotificationDispatcher,
    chat_user_id: str | None = None,
    project_name: str | None = None,
) -> int:
    """Run ``notify_assignees`` for a created to-do without ever raising.

    Returns:
        Number of DMs sent; 0 if notifying failed outright.
    """
    try:
        return await notify_assignees(work_item, directory, dispatcher, chat_user_id, project_name)
    except Exception as e:
        logger.error(f"Notifying assignees of to-do {work_item.id} failed: {e}", exc_info=True)
        return 0


async def create_batch(
    gateway: BasecampGateway,
    tasks: Sequence[ResolvedTask],
    directory: DirectoryCache | None = None,
    dispatcher: NotificationDispatcher | None = None,
) -> list[CreationOutcome]:
    """Create every task in order, isolating per-task failures.

    Returns:
        One outcome per input task, in input order.
    """
    outcomes: list[CreationOutcome] = []
    for index, task in enumerate(tasks, start=1):
        if not task.project_id:
            logger.info(f"Batch task {index} '{task.title}' has no project, not creating")
            outcomes.append(CreationOutcome(title=task.title, error=NO_PROJECT_ERROR))
            continue
        if not task.todo_list_id:
            outcomes.append(CreationOutcome(title=task.title, error=NO_TODO_LIST_ERROR))
            continue

        request = CreationRequest(
            project_id=task.project_id,
            todo_list_id=task.todo_list_id,
            title=task.title,
            description=task.description,
            assignee_id=task.assignee_id,
            due_on=task.due_on,
        )
        try:
            outcome = await create_work_item(gateway, request)
        except GatewayError as e:
            logger.error(f"Batch task {index} '{task.title}' failed: {e}")
            outcomes.append(CreationOutcome(title=task.title, error="Basecamp rejected the task"))
            continue

        outcomes.append(outcome)
        if directory is not None and dispatcher is not None and outcome.work_item is not None:
            await notify_created(outcome.work_item, directory, dispatcher, task.chat_user_id)

    succeeded = sum(1 for o in outcomes if o.succeeded)
    logger.info(f"Batch creation finished: {succeeded}/{len(outcomes)} created")
    return outcomes


def format_created_message(work_item: WorkItem) -> str:
    """Confirmation sent to the chat user after a single creation."""
    assignees = ", ".join(a.name for a in work_item.assignees) or "Unassigned"
    lines = [
        "✅ Task created!",
        "",
        f"Title: {work_item.title}",
        f"Assignee: {assignees}",
        f"Due: {format_due(work_item.due_on)}",
    ]
    if work_item.url:
        lines.append(f"Link: {work_item.url}")
    return "\n".join(lines)


def format_batch_summary(outcomes: Sequence[CreationOutcome]) -> str:
    """One aggregate message with a line per task, in input order."""
    succeeded = sum(1 for o in outcomes if o.succeeded)
    lines = [f"📋 Created {succeeded} of {len(outcomes)} tasks:", ""]
    for index, outcome in enumerate(outcomes, start=1):
        if outcome.work_item is not None:
            line = f"{index}. ✅ {outcome.title}"
            if outcome.work_item.url:
                line += f" - {outcome.work_item.url}"
        else:
            line = f"{index}. ❌ {outcome.title} - {outcome.error or 'Failed'}"
        lines.append(line)
    return "\n".join(lines)
