"""Entity resolution: extracted names to Basecamp identifiers.

Matching is deliberately simple and deterministic. Projects match by exact
case-insensitive name first, then by containment; people by exact name, then
containment in either direction. The first match in directory order wins and
there is no fuzzy or edit-distance matching.
"""

import logging
from collections.abc import Awaitable, Callable, Sequence
from datetime import date

from taskbot.core.errors import GatewayError
from taskbot.model.task import Member, Person, ProjectRef, ResolvedTask, TaskIntent
from taskbot.resolution.dates import parse_due

logger = logging.getLogger(__name__)


def match_project(name: str | None, projects: Sequence[ProjectRef]) -> ProjectRef | None:
    """Find a project by extracted name.

    Exact case-insensitive equality always beats substring containment,
    regardless of where the candidates sit in the list.
    """
    if not name or not name.strip():
        return None
    needle = name.strip().lower()

    for project in projects:
        if project.name.strip().lower() == needle:
            return project
    for project in projects:
        if needle in project.name.lower():
            return project
    return None


def match_person(name: str | None, people: Sequence[Person]) -> Person | None:
    """Find a directory person by extracted name.

    Order: exact equality, directory name contains extracted name, extracted
    name contains directory name.
    """
    if not name or not name.strip():
        return None
    needle = name.strip().lower()

    for person in people:
        if person.name.strip().lower() == needle:
            return person
    for person in people:
        if needle in person.name.lower():
            return person
    for person in people:
        candidate = person.name.strip().lower()
        if candidate and candidate in needle:
            return person
    return None


class ResolutionBatch:
    """Per-batch cache for the live Basecamp people list.

    The email fallback needs the workspace member list; it is fetched at most
    once per batch, however many tasks need it.
    """

    def __init__(self, fetch_members: Callable[[], Awaitable[list[Member]]]):
        self._fetch_members = fetch_members
        self._members: list[Member] | None = None

    async def members(self) -> list[Member]:
        if self._members is None:
            self._members = await self._fetch_members()
            logger.debug(f"Fetched {len(self._members)} workspace members for resolution")
        return self._members


def _assign(task: ResolvedTask, person: Person, assignee_id: str) -> None:
    # chat_user_id is only ever set alongside a Basecamp assignee id
    task.assignee_id = assignee_id
    task.assignee_email = person.email
    task.chat_user_id = person.chat_user_id


class EntityResolver:
    """Resolves a ``TaskIntent`` into a ``ResolvedTask``.

    Never raises for a miss: unresolved fields stay ``None`` and are filled in
    later by interactive prompts.
    """

    async def resolve(
        self,
        intent: TaskIntent,
        people: Sequence[Person],
        projects: Sequence[ProjectRef],
        batch: ResolutionBatch,
        today: date,
    ) -> ResolvedTask:
        """Resolve project, assignee and due date for one intent.

        Args:
            intent: Extracted task.
            people: Directory people.
            projects: Live Basecamp projects.
            batch: Shared per-batch member cache.
            today: Reference date for relative due dates.

        Returns:
            ResolvedTask with ids where resolution succeeded.
        """
        task = ResolvedTask(title=intent.title, description=intent.description)

        project = match_project(intent.project_name, projects)
        if project:
            task.project_id = project.id
            logger.info(f"Matched project '{intent.project_name}' -> {project.name} ({project.id})")
        elif intent.project_name:
            logger.info(f"No project match for '{intent.project_name}'")

        if intent.assignee_names:
            await self._resolve_assignee(task, intent.assignee_names[0], people, batch)

        if intent.due_date_expression:
            due = parse_due(intent.due_date_expression, today)
            task.due_on = due.value
            task.due_resolved = due.is_resolved
            if not due.is_resolved:
                logger.info(f"Could not parse due date '{intent.due_date_expression}'")

        return task

    async def _resolve_assignee(
        self,
        task: ResolvedTask,
        name: str,
        people: Sequence[Person],
        batch: ResolutionBatch,
    ) -> None:
        person = match_person(name, people)
        if person is None:
            logger.info(f"No directory match for assignee '{name}'")
            return

        if person.external_system_id:
            _assign(task, person, person.external_system_id)
            logger.info(f"Matched assignee '{name}' -> {person.name} (stored id {person.external_system_id})")
            return

        email = (person.email or "").strip().lower()
        if not email:
            return
        try:
            members = await batch.members()
        except GatewayError as e:
            logger.warning(f"Could not load Basecamp people for email match of {person.name}: {e}")
            return

        for member in members:
            if member.email and member.email.strip().lower() == email:
                _assign(task, person, member.id)
                logger.info(f"Matched assignee '{name}' -> {person.name} via email ({member.id})")
                return
        logger.info(f"Directory person {person.name} has no Basecamp account matching {email}")
