"""Tests for work item creation and assignee notification."""

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from taskbot.conversation.pipeline import (
    NO_PROJECT_ERROR,
    CreationOutcome,
    CreationRequest,
    create_batch,
    create_work_item,
    format_batch_summary,
    format_created_message,
    notify_assignees,
    notify_created,
)
from taskbot.core.errors import DirectoryError, GatewayError, NotificationError
from taskbot.model.task import Member, ResolvedTask, WorkItem


def _work_item(item_id="1", title="Task", assignees=None):
    return WorkItem(
        id=item_id,
        title=title,
        description="desc",
        url=f"https://bc.test/todos/{item_id}",
        assignees=assignees or [],
        project_id="100",
    )


@pytest.fixture
def gateway():
    """Gateway whose create_todo echoes the requested assignee back."""
    gw = MagicMock()
    gw.list_project_members = AsyncMock(return_value=[Member(id="501", name="Sarah")])

    async def create_todo(project_id, todo_list_id, title, description, assignee_ids, due_on):
        assignees = [Member(id=a, name=f"Person {a}", email=f"{a}@example.com") for a in assignee_ids]
        return WorkItem(
            id=f"wi-{title}",
            title=title,
            description=description,
            url=f"https://bc.test/todos/{title}",
            assignees=assignees,
            due_on=due_on,
            project_id=project_id,
        )

    gw.create_todo = AsyncMock(side_effect=create_todo)
    return gw


@pytest.fixture
def directory():
    d = MagicMock()
    d.find_chat_user_id = AsyncMock(return_value="U501")
    return d


@pytest.fixture
def dispatcher():
    d = MagicMock()
    d.send_direct_message = AsyncMock(return_value="1700000000.000100")
    return d


class TestCreateWorkItem:
    """Tests for single creation."""

    @pytest.mark.asyncio
    async def test_creates_with_assignee_and_due(self, gateway):
        """Test the request is passed through to the gateway."""
        request = CreationRequest("100", "7", "Fix login", "Fix it", "501", date(2025, 10, 12))

        outcome = await create_work_item(gateway, request)

        assert outcome.succeeded is True
        assert outcome.warnings == []
        gateway.create_todo.assert_awaited_once_with(
            "100", "7", "Fix login", "Fix it", ["501"], date(2025, 10, 12)
        )

    @pytest.mark.asyncio
    async def test_membership_miss_does_not_block(self, gateway):
        """Test an assignee outside the project is still assigned."""
        gateway.list_project_members.return_value = [Member(id="777", name="Other")]

        outcome = await create_work_item(gateway, CreationRequest("100", "7", "T", "D", "501"))

        assert outcome.succeeded is True
        assert gateway.create_todo.await_args.args[4] == ["501"]

    @pytest.mark.asyncio
    async def test_membership_check_failure_does_not_block(self, gateway):
        """Test a failed membership lookup is ignored."""
        gateway.list_project_members.side_effect = GatewayError("boom", status_code=500)

        outcome = await create_work_item(gateway, CreationRequest("100", "7", "T", "D", "501"))

        assert outcome.succeeded is True

    @pytest.mark.asyncio
    async def test_no_assignee_skips_membership(self, gateway):
        """Test unassigned tasks don't query members."""
        await create_work_item(gateway, CreationRequest("100", "7", "T", "D"))

        gateway.list_project_members.assert_not_awaited()
        assert gateway.create_todo.await_args.args[4] == []

    @pytest.mark.asyncio
    async def test_zero_assignee_anomaly_is_a_warning(self, gateway):
        """Test an assignment that didn't stick is reported, not failed."""
        gateway.create_todo.side_effect = None
        gateway.create_todo.return_value = _work_item()

        outcome = await create_work_item(gateway, CreationRequest("100", "7", "T", "D", "501"))

        assert outcome.succeeded is True
        assert len(outcome.warnings) == 1

    @pytest.mark.asyncio
    async def test_rejection_raises(self, gateway):
        """Test a rejected creation propagates GatewayError."""
        gateway.create_todo.side_effect = GatewayError("nope", status_code=422)

        with pytest.raises(GatewayError):
            await create_work_item(gateway, CreationRequest("100", "7", "T", "D"))


class TestNotifyAssignees:
    """Tests for assignee DMs."""

    @pytest.mark.asyncio
    async def test_known_chat_id_skips_lookup(self, directory, dispatcher):
        """Test a pre-resolved Slack id is used directly."""
        item = _work_item(assignees=[Member(id="501", name="Sarah")])

        sent = await notify_assignees(item, directory, dispatcher, chat_user_id="U9")

        assert sent == 1
        directory.find_chat_user_id.assert_not_awaited()
        assert dispatcher.send_direct_message.await_args.args[0] == "U9"

    @pytest.mark.asyncio
    async def test_lookup_by_id_then_email(self, directory, dispatcher):
        """Test each assignee is looked up with id and email."""
        item = _work_item(assignees=[Member(id="501", name="Sarah", email="sarah@example.com")])

        assert await notify_assignees(item, directory, dispatcher) == 1

        directory.find_chat_user_id.assert_awaited_once_with("501", "sarah@example.com")

    @pytest.mark.asyncio
    async def test_missing_identity_skipped(self, directory, dispatcher):
        """Test assignees without a Slack identity get no DM."""
        directory.find_chat_user_id.return_value = None
        item = _work_item(assignees=[Member(id="501", name="Sarah")])

        assert await notify_assignees(item, directory, dispatcher) == 0
        dispatcher.send_direct_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_directory_failure_skipped(self, directory, dispatcher):
        """Test a directory outage skips DMs without raising."""
        directory.find_chat_user_id.side_effect = DirectoryError("down")
        item = _work_item(assignees=[Member(id="501", name="Sarah")])

        assert await notify_assignees(item, directory, dispatcher) == 0

    @pytest.mark.asyncio
    async def test_dispatcher_failure_swallowed(self, directory, dispatcher):
        """Test Slack failures never propagate."""
        dispatcher.send_direct_message.side_effect = NotificationError("slack down")
        item = _work_item(assignees=[Member(id="501", name="Sarah")])

        assert await notify_assignees(item, directory, dispatcher) == 0

    @pytest.mark.asyncio
    async def test_unassigned_item_not_notified(self, directory, dispatcher):
        """Test a known Slack id gets no DM when the to-do has no assignees."""
        item = _work_item(assignees=[])

        sent = await notify_assignees(item, directory, dispatcher, chat_user_id="U777")

        assert sent == 0
        dispatcher.send_direct_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_notify_created_never_raises(self, directory, dispatcher):
        """Test unexpected notification errors are logged, not raised."""
        dispatcher.send_direct_message.side_effect = RuntimeError("socket closed")
        item = _work_item(assignees=[Member(id="501", name="Sarah")])

        assert await notify_created(item, directory, dispatcher) == 0


class TestCreateBatch:
    """Tests for batch creation."""

    @pytest.mark.asyncio
    async def test_one_outcome_per_task_in_order(self, gateway, directory, dispatcher):
        """Test outcomes line up with inputs; no-project tasks fail without a call."""
        tasks = [
            ResolvedTask(title="A", description="a", project_id="100", todo_list_id="7", assignee_id="501"),
            ResolvedTask(title="B", description="b"),
            ResolvedTask(title="C", description="c", project_id="100", todo_list_id="7"),
        ]

        outcomes = await create_batch(gateway, tasks, directory, dispatcher)

        assert [o.title for o in outcomes] == ["A", "B", "C"]
        assert [o.succeeded for o in outcomes] == [True, False, True]
        assert outcomes[1].error == NO_PROJECT_ERROR
        assert gateway.create_todo.await_count == 2
        dispatcher.send_direct_message.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_per_task_failure_isolated(self, gateway):
        """Test one rejected task doesn't stop the rest."""
        original = gateway.create_todo.side_effect

        async def flaky(project_id, todo_list_id, title, *args):
            if title == "B":
                raise GatewayError("rejected", status_code=422)
            return await original(project_id, todo_list_id, title, *args)

        gateway.create_todo.side_effect = flaky
        tasks = [
            ResolvedTask(title=t, description=t, project_id="100", todo_list_id="7") for t in ("A", "B", "C")
        ]

        outcomes = await create_batch(gateway, tasks)

        assert [o.succeeded for o in outcomes] == [True, False, True]
        assert outcomes[1].error

    @pytest.mark.asyncio
    async def test_unresolved_assignee_gets_no_dm(self, gateway, directory, dispatcher):
        """Test a task created without an assignee never DMs the extracted person."""
        tasks = [
            ResolvedTask(title="A", description="a", project_id="100", todo_list_id="7", chat_user_id="U777"),
            ResolvedTask(title="B", description="b", project_id="100", todo_list_id="7"),
        ]

        outcomes = await create_batch(gateway, tasks, directory, dispatcher)

        assert [c.args[4] for c in gateway.create_todo.await_args_list] == [[], []]
        assert all(o.succeeded for o in outcomes)
        dispatcher.send_direct_message.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [NotificationError("slack down"), RuntimeError("socket closed")])
    async def test_notification_failure_keeps_success(self, gateway, directory, dispatcher, error):
        """Test a failing notifier leaves every created task reported as created."""
        dispatcher.send_direct_message.side_effect = error
        tasks = [
            ResolvedTask(title=t, description=t, project_id="100", todo_list_id="7", assignee_id="501")
            for t in ("A", "B")
        ]

        outcomes = await create_batch(gateway, tasks, directory, dispatcher)

        assert [o.succeeded for o in outcomes] == [True, True]
        assert dispatcher.send_direct_message.await_count == 2
        assert format_batch_summary(outcomes).startswith("📋 Created 2 of 2 tasks:")

    @pytest.mark.asyncio
    async def test_without_dispatcher_no_notifications(self, gateway, directory):
        """Test batches can be created with notifications disabled."""
        tasks = [ResolvedTask(title="A", description="a", project_id="100", todo_list_id="7", assignee_id="501")]

        outcomes = await create_batch(gateway, tasks, directory, None)

        assert outcomes[0].succeeded is True
        directory.find_chat_user_id.assert_not_awaited()


class TestFormatting:
    """Tests for user-facing messages."""

    def test_batch_summary(self):
        """Test the summary counts successes and lists each task."""
        outcomes = [
            CreationOutcome(title="A", work_item=_work_item("1", "A")),
            CreationOutcome(title="B", error=NO_PROJECT_ERROR),
        ]

        summary = format_batch_summary(outcomes)

        assert summary.splitlines()[0] == "📋 Created 1 of 2 tasks:"
        assert "1. ✅ A - https://bc.test/todos/1" in summary
        assert "2. ❌ B - No project selected" in summary

    def test_created_message(self):
        """Test the single-task confirmation."""
        item = _work_item(assignees=[Member(id="501", name="Sarah")])
        item.due_on = date(2025, 10, 5)

        message = format_created_message(item)

        assert "Assignee: Sarah" in message
        assert "Due: Oct 5, 2025" in message
        assert item.url in message

    def test_created_message_unassigned(self):
        """Test unassigned, undated tasks render placeholders."""
        message = format_created_message(_work_item())

        assert "Assignee: Unassigned" in message
        assert "Due: No due date" in message
