"""The task wizard: a per-user state machine over chat messages and buttons.

Single task::

    Idle -> AwaitingIntent -> Confirming -> [SelectingProject] -> [SelectingTodoList]
         -> [SelectingAssignee] -> [AwaitingDueDate] -> create -> Idle

Steps in brackets are only visited for fields extraction could not resolve.
Several tasks in one message skip Confirming and go through the batch loop,
which asks per task for project, to-do list and due date only where missing,
then creates every task and posts one summary.

Every handler runs inside a guard: an unexpected error resets the session to
Idle and tells the user in plain language. Work that finishes after the
session was reset (``/cancel`` while a call was in flight) is discarded by
comparing the session generation.
"""

import logging
from collections.abc import Awaitable, Callable
from datetime import date

from taskbot.channels.base import ChannelAdapter
from taskbot.conversation import keyboards
from taskbot.conversation.pipeline import (
    CreationRequest,
    create_batch,
    create_work_item,
    format_batch_summary,
    format_created_message,
    notify_created,
)
from taskbot.conversation.store import SessionStore
from taskbot.core.errors import DirectoryError, GatewayError
from taskbot.core.timezone import format_due
from taskbot.directory.cache import DirectoryCache
from taskbot.gateway.basecamp import DEFAULT_TODO_LIST_NAME, BasecampGateway
from taskbot.gateway.oauth import BasecampOAuth
from taskbot.intent.extractor import ExtractionContext, IntentExtractor
from taskbot.model.message import ButtonPress, Keyboard, Message
from taskbot.model.session import (
    FIELD_DUE_DATE,
    FIELD_PROJECT,
    FIELD_TODO_LIST,
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
)
from taskbot.model.task import Person, ProjectRef, ResolvedTask, TodoList
from taskbot.notifications.dispatcher import NotificationDispatcher
from taskbot.resolution.dates import DueKind, parse_due
from taskbot.resolution.resolver import EntityResolver, ResolutionBatch

logger = logging.getLogger(__name__)

# UI message purposes tracked on the session for cleanup
UI_PROCESSING = "processing"
UI_PROMPT = "prompt"

ASK_DESCRIPTION = "📝 Describe the task (or several tasks) you want to create."
BUTTON_HINT = "👆 Please choose one of the buttons above, or send /cancel to start over."
EXPIRED_BUTTON = "That button is no longer active. Send a new message to create a task."
DUE_DATE_PROMPT = (
    "📅 When is this due?\n"
    "Reply with a date like 'tomorrow', 'in 3 days', '2025-10-12' or '12/10/2025', "
    "or 'skip' for no due date."
)
INVALID_DATE = "❌ I couldn't understand that date. Try 'tomorrow', 'in 3 days', '2025-10-12', or 'skip'."
GATEWAY_FAILURE = "❌ Basecamp request failed. Please try again from the start."
GENERIC_FAILURE = "❌ Something went wrong. Please start again."
READ_RETRY = "⚠️ Couldn't load that from Basecamp just now. Tap your choice again to retry, or /cancel."
CREATE_FAILURE = "❌ Basecamp couldn't create the task. Nothing was saved, please try again."

GatewayProvider = Callable[[str], BasecampGateway | None]


class ConversationEngine:
    """Drives the task wizard for every user.

    Args:
        channel: Chat transport used for replies and UI cleanup.
        sessions: Per-user session store.
        extractor: Language-model intent extraction.
        resolver: Name-to-id resolution.
        directory: Shared people/project directory cache.
        gateways: Returns the Basecamp gateway for a user id, or None when the
            user has not connected Basecamp.
        dispatcher: Slack dispatcher for assignee DMs (None disables them).
        oauth: Builds the connect link sent to users without a credential.
        today: Reference date for relative due dates.
    """

    def __init__(
        self,
        channel: ChannelAdapter,
        sessions: SessionStore,
        extractor: IntentExtractor,
        resolver: EntityResolver,
        directory: DirectoryCache,
        gateways: GatewayProvider,
        dispatcher: NotificationDispatcher | None = None,
        oauth: BasecampOAuth | None = None,
        today: Callable[[], date] = date.today,
    ):
        self._channel = channel
        self._sessions = sessions
        self._extractor = extractor
        self._resolver = resolver
        self._directory = directory
        self._gateways = gateways
        self._dispatcher = dispatcher
        self._oauth = oauth
        self._today = today

    # =========================================================================
    # Entry points
    # =========================================================================

    async def handle_message(self, message: Message) -> None:
        """Handle a non-command text message."""
        session = self._sessions.get_or_create(message.user_id, message.session_key)
        text = message.content.strip()
        if not text:
            await self._send(session, "Please send the task as text.")
            return

        state = session.state
        if isinstance(state, (Idle, AwaitingIntent)):
            await self._guarded(session, self._process_intent(session, text))
        elif isinstance(state, AwaitingDueDate):
            await self._guarded(session, self._on_due_text(session, text))
        elif isinstance(state, BatchAwaitingDueDate):
            await self._guarded(session, self._on_batch_due_text(session, text))
        else:
            await self._send(session, BUTTON_HINT)

    async def handle_button(self, press: ButtonPress) -> None:
        """Handle an inline-button callback."""
        session = self._sessions.get_or_create(press.user_id, press.session_key)
        callback = keyboards.parse_callback(press.data)
        if callback is None:
            logger.warning(f"Unknown callback data from user {press.user_id}: {press.data}")
            return

        logger.debug(f"Button '{press.data}' from user {press.user_id} at step {session.step}")
        await self._guarded(session, self._dispatch_button(session, callback), read_path=True)

    async def start_task(self, user_id: str, session_key: str) -> None:
        """Explicitly start a new task: reset and ask for the description."""
        session = self._sessions.get_or_create(user_id, session_key)
        if await self._require_gateway(session) is None:
            return
        await self._clear_ui(session)
        session.reset()
        session.state = AwaitingIntent()
        await self._send(session, ASK_DESCRIPTION)

    async def cancel(self, user_id: str, session_key: str) -> bool:
        """Cancel the active wizard.

        Deletes every tracked prompt and resets to Idle. Anything still in
        flight for the old wizard is discarded when it returns.

        Returns:
            True if a wizard was active.
        """
        session = self._sessions.get_or_create(user_id, session_key)
        if not session.is_active:
            return False
        logger.info(f"User {user_id} cancelled the wizard at step {session.step}")
        await self._clear_ui(session)
        session.reset()
        return True

    # =========================================================================
    # Plumbing
    # =========================================================================

    async def _guarded(self, session: Session, action: Awaitable[None], read_path: bool = False) -> None:
        """Run a transition; failures reset the session with a plain message.

        With ``read_path`` a Basecamp failure keeps the session as it is and
        asks the user to retry the choice instead.
        """
        try:
            await action
        except GatewayError as e:
            logger.error(f"Basecamp error for user {session.user_id} at step {session.step}: {e}")
            if read_path:
                await self._send(session, READ_RETRY)
            else:
                await self._fail(session, GATEWAY_FAILURE)
        except Exception as e:
            logger.error(f"Wizard error for user {session.user_id} at step {session.step}: {e}", exc_info=True)
            await self._fail(session, GENERIC_FAILURE)

    async def _fail(self, session: Session, text: str) -> None:
        message_ids = session.take_ui()
        session.reset()
        try:
            for message_id in message_ids:
                await self._channel.delete_message(session.session_key, message_id)
            await self._channel.send_message(session.session_key, text)
        except Exception as e:
            logger.error(f"Could not report failure to user {session.user_id}: {e}")

    async def _send(
        self,
        session: Session,
        text: str,
        keyboard: Keyboard | None = None,
        purpose: str | None = None,
    ) -> None:
        sent = await self._channel.send_message(session.session_key, text, keyboard=keyboard)
        if purpose:
            session.track_ui(purpose, sent.id)

    async def _prompt(self, session: Session, text: str, keyboard: Keyboard | None = None) -> None:
        """Replace the current interactive prompt with a new one."""
        await self._clear_ui(session, UI_PROMPT)
        await self._send(session, text, keyboard, purpose=UI_PROMPT)

    async def _clear_ui(self, session: Session, purpose: str | None = None) -> None:
        for message_id in session.take_ui(purpose):
            await self._channel.delete_message(session.session_key, message_id)

    def _is_stale(self, session: Session, generation: int) -> bool:
        if session.generation != generation:
            logger.info(f"Discarding stale result for user {session.user_id} (session was reset)")
            return True
        return False

    async def _require_gateway(self, session: Session) -> BasecampGateway | None:
        gateway = self._gateways(session.user_id)
        if gateway is not None:
            return gateway

        if self._oauth is not None and self._oauth.is_configured:
            link = self._oauth.authorization_url(session.user_id)
            await self._send(session, f"🔐 Connect your Basecamp account first:\n{link}")
        else:
            await self._send(session, "🔐 Basecamp is not connected for your account. Ask an admin to set it up.")
        return None

    def _gateway(self, session: Session) -> BasecampGateway:
        gateway = self._gateways(session.user_id)
        if gateway is None:
            raise GatewayError(f"No Basecamp credential for user {session.user_id}")
        return gateway

    async def _directory_people(self) -> list[Person]:
        try:
            return await self._directory.people()
        except DirectoryError as e:
            logger.warning(f"Directory unavailable, extracting without people context: {e}")
            return []

    def _project_name(self, session: Session, project_id: str | None) -> str | None:
        for project in session.listings.projects:
            if project.id == project_id:
                return project.name
        return None

    async def _projects(self, session: Session, gateway: BasecampGateway) -> list[ProjectRef]:
        if not session.listings.projects:
            session.listings.projects = await gateway.list_projects()
        return session.listings.projects

    # =========================================================================
    # Extraction
    # =========================================================================

    async def _process_intent(self, session: Session, text: str) -> None:
        gateway = await self._require_gateway(session)
        if gateway is None:
            return

        # A new message always starts a fresh cycle
        await self._clear_ui(session)
        session.reset()
        generation = session.generation
        session.state = AwaitingIntent()
        session.selections.original_message = text

        await self._send(session, "🤖 Processing your task with AI...", purpose=UI_PROCESSING)

        projects = await gateway.list_projects()
        people = await self._directory_people()
        batch = await self._extractor.extract(text, ExtractionContext(projects=projects, people=people))
        if self._is_stale(session, generation):
            return

        resolution = ResolutionBatch(gateway.list_workspace_members)
        today = self._today()
        resolved = [
            await self._resolver.resolve(intent, people, projects, resolution, today) for intent in batch.tasks
        ]
        if self._is_stale(session, generation):
            return

        await self._clear_ui(session, UI_PROCESSING)
        session.listings.projects = projects

        if batch.is_multi:
            await self._start_batch(session, gateway, resolved)
            return

        session.selections = Selections.from_resolved(resolved[0], text)
        session.state = Confirming()
        await self._show_confirmation(session)

    async def _show_confirmation(self, session: Session) -> None:
        s = session.selections
        if s.due_resolved:
            due = format_due(s.due_on)
        else:
            due = "Not set"
        lines = [
            "📝 Here's the task I understood:",
            "",
            f"Title: {s.title}",
            f"Description: {s.description}",
            f"Project: {self._project_name(session, s.project_id) or 'Not set'}",
            f"Assignee: {s.assignee_email or 'Not set'}",
            f"Due: {due}",
            "",
            "Confirm to continue, or Rewrite to have the AI try again.",
        ]
        await self._prompt(session, "\n".join(lines), keyboards.confirm_keyboard())

    # =========================================================================
    # Buttons
    # =========================================================================

    async def _dispatch_button(self, session: Session, callback: keyboards.Callback) -> None:
        state = session.state

        if callback.action in ("confirm", "rewrite"):
            if not isinstance(state, Confirming):
                await self._send(session, EXPIRED_BUTTON)
            elif callback.action == "confirm":
                await self._on_confirm(session)
            else:
                await self._on_rewrite(session)
            return

        if callback.action == "project" and isinstance(state, (SelectingProject, BatchSelectingProject)):
            if callback.is_page:
                await self._show_project_picker(session, callback.page or 0)
            elif isinstance(state, SelectingProject):
                await self._on_project(session, callback.value or "")
            else:
                await self._on_batch_project(session, state, callback.value or "")
            return

        if callback.action == "list" and isinstance(state, (SelectingTodoList, BatchSelectingTodoList)):
            if callback.is_page:
                await self._show_todo_list_picker(session, callback.page or 0)
            elif isinstance(state, SelectingTodoList):
                await self._on_todo_list(session, callback.value or "")
            else:
                await self._on_batch_todo_list(session, state, callback.value or "")
            return

        if callback.action == "person" and isinstance(state, SelectingAssignee):
            if callback.is_page:
                await self._show_assignee_picker(session, callback.page or 0, state.showing_all)
            else:
                await self._on_person(session, callback.value)
            return

        await self._send(session, EXPIRED_BUTTON)

    async def _on_confirm(self, session: Session) -> None:
        logger.info(f"User {session.user_id} confirmed '{session.selections.title}'")
        await self._advance(session)

    async def _on_rewrite(self, session: Session) -> None:
        original = session.selections.original_message or session.selections.description or ""
        generation = session.generation
        await self._send(session, "✏️ Rewriting...", purpose=UI_PROCESSING)

        context = ExtractionContext(projects=session.listings.projects, people=await self._directory_people())
        intent = await self._extractor.rewrite(original, context)
        if self._is_stale(session, generation):
            return

        await self._clear_ui(session, UI_PROCESSING)
        session.selections.title = intent.title
        session.selections.description = intent.description
        await self._show_confirmation(session)

    async def _on_project(self, session: Session, project_id: str) -> None:
        s = session.selections
        s.project_id = project_id
        s.todo_list_id = None
        logger.info(f"User {session.user_id} picked project {project_id}")
        await self._advance(session)

    async def _on_todo_list(self, session: Session, todo_list_id: str) -> None:
        session.selections.todo_list_id = todo_list_id
        logger.info(f"User {session.user_id} picked to-do list {todo_list_id}")
        await self._advance(session)

    async def _on_person(self, session: Session, person_id: str | None) -> None:
        s = session.selections
        s.assignee_decided = True
        s.assignee_id = person_id
        s.chat_user_id = None
        s.assignee_email = None
        if person_id is not None:
            for member in session.listings.people:
                if member.id == person_id:
                    s.assignee_email = member.email
                    break
        logger.info(f"User {session.user_id} picked assignee {person_id or 'none'}")
        await self._advance(session)

    # =========================================================================
    # Single-task wizard
    # =========================================================================

    async def _advance(self, session: Session) -> None:
        """Move to the first field still missing, or create the to-do."""
        s = session.selections
        gateway = self._gateway(session)
        generation = session.generation

        if not s.project_id:
            await self._projects(session, gateway)
            if self._is_stale(session, generation):
                return
            await self._show_project_picker(session, 0)
            return

        if not s.todo_list_id:
            todo_lists = await self._todo_lists_or_default(gateway, s.project_id)
            if self._is_stale(session, generation):
                return
            if len(todo_lists) == 1:
                s.todo_list_id = todo_lists[0].id
                logger.info(f"Auto-selected to-do list '{todo_lists[0].name}' ({todo_lists[0].id})")
            else:
                session.listings.todo_lists = todo_lists
                session.state = SelectingTodoList()
                await self._show_todo_list_picker(session, 0)
                return

        if not s.assignee_decided:
            await self._show_assignee_picker(session, 0)
            return

        if not s.due_resolved:
            session.state = AwaitingDueDate()
            await self._prompt(session, DUE_DATE_PROMPT)
            return

        await self._create_single(session)

    async def _todo_lists_or_default(self, gateway: BasecampGateway, project_id: str) -> list[TodoList]:
        """The project's to-do lists; a project with none gets a default one."""
        todo_lists = await gateway.list_todo_lists(project_id)
        if todo_lists:
            return todo_lists
        logger.info(f"Project {project_id} has no to-do lists, creating '{DEFAULT_TODO_LIST_NAME}'")
        return [await gateway.create_todo_list(project_id, DEFAULT_TODO_LIST_NAME)]

    async def _show_project_picker(self, session: Session, page: int) -> None:
        projects = session.listings.projects
        if not projects:
            await self._fail(session, "❌ No projects found in your Basecamp account.")
            return

        page = keyboards.clamp_page(page, len(projects), keyboards.PROJECTS_PER_PAGE)
        if isinstance(session.state, BatchSelectingProject):
            session.state = BatchSelectingProject(entry=session.state.entry, page=page)
            header = self._batch_header(session)
        else:
            session.state = SelectingProject(page=page)
            header = ""
        await self._prompt(session, f"{header}📁 Select a project:", keyboards.project_keyboard(projects, page))

    async def _show_todo_list_picker(self, session: Session, page: int) -> None:
        todo_lists = session.listings.todo_lists
        page = keyboards.clamp_page(page, len(todo_lists), keyboards.TODO_LISTS_PER_PAGE)
        if isinstance(session.state, BatchSelectingTodoList):
            session.state = BatchSelectingTodoList(entry=session.state.entry, page=page)
            header = self._batch_header(session)
        else:
            session.state = SelectingTodoList(page=page)
            header = ""
        await self._prompt(session, f"{header}📋 Select a to-do list:", keyboards.todo_list_keyboard(todo_lists, page))

    async def _show_assignee_picker(self, session: Session, page: int, showing_all: bool | None = None) -> None:
        """Show the people picker.

        On first display the list is loaded from the project's members,
        falling back to every account member when that lookup fails.
        """
        if showing_all is None:
            gateway = self._gateway(session)
            project_id = session.selections.project_id or ""
            generation = session.generation
            try:
                people = await gateway.list_project_members(project_id)
                showing_all = False
            except GatewayError as e:
                logger.warning(f"Project members unavailable for {project_id}, listing all members: {e}")
                people = await gateway.list_workspace_members()
                showing_all = True
            if self._is_stale(session, generation):
                return
            session.listings.people = people

        people = session.listings.people
        page = keyboards.clamp_page(page, len(people), keyboards.PEOPLE_PER_PAGE)
        session.state = SelectingAssignee(page=page, showing_all=showing_all)

        text = "👤 Who should this be assigned to?"
        if showing_all:
            text += "\n(showing all account members)"
        await self._prompt(session, text, keyboards.person_keyboard(people, page))

    async def _on_due_text(self, session: Session, text: str) -> None:
        due = parse_due(text, self._today())
        if due.kind is DueKind.INVALID:
            await self._send(session, INVALID_DATE)
            return
        session.selections.due_on = due.value
        session.selections.due_resolved = True
        await self._create_single(session)

    async def _create_single(self, session: Session) -> None:
        s = session.selections
        gateway = self._gateway(session)
        generation = session.generation
        request = CreationRequest(
            project_id=s.project_id or "",
            todo_list_id=s.todo_list_id or "",
            title=s.title or "",
            description=s.description or "",
            assignee_id=s.assignee_id,
            due_on=s.due_on,
        )

        await self._clear_ui(session, UI_PROMPT)
        await self._send(session, "⏳ Creating task in Basecamp...", purpose=UI_PROCESSING)
        try:
            outcome = await create_work_item(gateway, request)
        except GatewayError as e:
            logger.error(f"Creating '{request.title}' failed for user {session.user_id}: {e}")
            await self._fail(session, CREATE_FAILURE)
            return
        if self._is_stale(session, generation):
            return

        work_item = outcome.work_item
        if work_item is not None and self._dispatcher is not None:
            await notify_created(
                work_item,
                self._directory,
                self._dispatcher,
                chat_user_id=s.chat_user_id,
                project_name=self._project_name(session, s.project_id),
            )

        await self._clear_ui(session)
        if work_item is not None:
            text = format_created_message(work_item)
            for warning in outcome.warnings:
                text += f"\n⚠️ {warning}"
            await self._send(session, text)
        session.reset()

    # =========================================================================
    # Batch wizard
    # =========================================================================

    def _batch_header(self, session: Session) -> str:
        index = session.current_batch_index
        if index >= len(session.batch_needing_info):
            return ""
        entry = session.batch_needing_info[index]
        task = session.batch_tasks[entry.task_index]
        return f"Task {entry.task_index + 1} of {len(session.batch_tasks)}: {task.title}\n\n"

    async def _start_batch(self, session: Session, gateway: BasecampGateway, tasks: list[ResolvedTask]) -> None:
        """Pre-scan a multi-task extraction and start the batch loop."""
        generation = session.generation
        session.batch_tasks = tasks
        lists_by_project: dict[str, list[TodoList]] = {}
        needing: list[PendingInfo] = []

        for index, task in enumerate(tasks):
            missing: list[str] = []
            if not task.project_id:
                missing.append(FIELD_PROJECT)
            elif not task.todo_list_id:
                if task.project_id not in lists_by_project:
                    lists_by_project[task.project_id] = await self._todo_lists_or_default(gateway, task.project_id)
                todo_lists = lists_by_project[task.project_id]
                if len(todo_lists) == 1:
                    task.todo_list_id = todo_lists[0].id
                else:
                    missing.append(FIELD_TODO_LIST)
            if not task.due_resolved:
                missing.append(FIELD_DUE_DATE)
            if missing:
                needing.append(PendingInfo(task_index=index, missing_fields=missing))

        if self._is_stale(session, generation):
            return

        session.batch_needing_info = needing
        session.current_batch_index = 0
        logger.info(f"Batch of {len(tasks)} tasks for user {session.user_id}, {len(needing)} need more info")

        if not needing:
            await self._create_batch(session)
            return

        titles = "\n".join(f"{i}. {t.title}" for i, t in enumerate(tasks, start=1))
        await self._send(
            session,
            f"📋 I found {len(tasks)} tasks:\n{titles}\n\n{len(needing)} of them need a few more details.",
        )
        await self._batch_next(session)

    def _current_batch_task(self, session: Session) -> ResolvedTask:
        entry = session.batch_needing_info[session.current_batch_index]
        return session.batch_tasks[entry.task_index]

    async def _batch_next(self, session: Session) -> None:
        """Ask for the next missing field, or create everything when done."""
        gateway = self._gateway(session)
        generation = session.generation

        while session.current_batch_index < len(session.batch_needing_info):
            entry = session.batch_needing_info[session.current_batch_index]
            task = session.batch_tasks[entry.task_index]

            if not task.project_id:
                await self._projects(session, gateway)
                if self._is_stale(session, generation):
                    return
                session.state = BatchSelectingProject(entry=session.current_batch_index)
                await self._show_project_picker(session, 0)
                return

            if not task.todo_list_id:
                todo_lists = await self._todo_lists_or_default(gateway, task.project_id)
                if self._is_stale(session, generation):
                    return
                if len(todo_lists) == 1:
                    task.todo_list_id = todo_lists[0].id
                else:
                    session.listings.todo_lists = todo_lists
                    session.state = BatchSelectingTodoList(entry=session.current_batch_index)
                    await self._show_todo_list_picker(session, 0)
                    return

            if FIELD_DUE_DATE in entry.missing_fields and not task.due_resolved:
                session.state = BatchAwaitingDueDate(entry=session.current_batch_index)
                await self._prompt(session, self._batch_header(session) + DUE_DATE_PROMPT)
                return

            session.current_batch_index += 1

        await self._create_batch(session)

    async def _on_batch_project(self, session: Session, state: BatchSelectingProject, project_id: str) -> None:
        if state.entry != session.current_batch_index:
            await self._send(session, EXPIRED_BUTTON)
            return
        task = self._current_batch_task(session)
        task.project_id = project_id
        task.todo_list_id = None
        await self._batch_next(session)

    async def _on_batch_todo_list(self, session: Session, state: BatchSelectingTodoList, todo_list_id: str) -> None:
        if state.entry != session.current_batch_index:
            await self._send(session, EXPIRED_BUTTON)
            return
        self._current_batch_task(session).todo_list_id = todo_list_id
        await self._batch_next(session)

    async def _on_batch_due_text(self, session: Session, text: str) -> None:
        due = parse_due(text, self._today())
        if due.kind is DueKind.INVALID:
            await self._send(session, INVALID_DATE)
            return
        task = self._current_batch_task(session)
        task.due_on = due.value
        task.due_resolved = True
        await self._batch_next(session)

    async def _create_batch(self, session: Session) -> None:
        gateway = self._gateway(session)
        generation = session.generation

        await self._clear_ui(session, UI_PROMPT)
        await self._send(
            session, f"⏳ Creating {len(session.batch_tasks)} tasks in Basecamp...", purpose=UI_PROCESSING
        )
        outcomes = await create_batch(gateway, session.batch_tasks, self._directory, self._dispatcher)
        if self._is_stale(session, generation):
            return

        await self._clear_ui(session)
        await self._send(session, format_batch_summary(outcomes))
        session.reset()
