"""Tests for the wizard session model."""

from datetime import date

from taskbot.model.session import (
    AwaitingDueDate,
    BatchSelectingProject,
    Idle,
    PendingInfo,
    Selections,
    SelectingAssignee,
    Session,
)
from taskbot.model.task import ResolvedTask


class TestSession:
    """Tests for Session state helpers."""

    def test_new_session_is_idle(self):
        """Test a fresh session starts idle at step 0."""
        session = Session(user_id="7")

        assert session.step == 0
        assert session.is_active is False
        assert session.in_batch is False

    def test_step_follows_state(self):
        """Test step reports the numeric tag of the current state."""
        session = Session(user_id="7", state=SelectingAssignee(page=2))

        assert session.step == 5
        assert session.is_active is True

    def test_batch_states_flagged(self):
        """Test batch states are distinguished from single-task ones."""
        assert Session(user_id="7", state=BatchSelectingProject(entry=1)).in_batch is True
        assert Session(user_id="7", state=AwaitingDueDate()).in_batch is False

    def test_reset_clears_and_bumps_generation(self):
        """Test reset returns to Idle and invalidates in-flight work."""
        session = Session(user_id="7", state=AwaitingDueDate())
        session.selections.title = "Ship it"
        session.batch_needing_info.append(PendingInfo(task_index=0, missing_fields=["project"]))
        session.track_ui("project", "11")

        session.reset()

        assert isinstance(session.state, Idle)
        assert session.selections.is_empty()
        assert session.batch_needing_info == []
        assert session.ui_messages == {}
        assert session.generation == 1


class TestUiTracking:
    """Tests for interactive message bookkeeping."""

    def test_take_one_purpose(self):
        """Test taking one purpose leaves the others tracked."""
        session = Session(user_id="7")
        session.track_ui("project", "1")
        session.track_ui("project", "2")
        session.track_ui("due", "3")

        assert session.take_ui("project") == ["1", "2"]
        assert session.ui_messages == {"due": ["3"]}

    def test_take_all(self):
        """Test taking without a purpose drains everything."""
        session = Session(user_id="7")
        session.track_ui("project", "1")
        session.track_ui("due", "3")

        assert sorted(session.take_ui()) == ["1", "3"]
        assert session.ui_messages == {}

    def test_none_message_id_ignored(self):
        """Test sends that returned no id are not tracked."""
        session = Session(user_id="7")
        session.track_ui("project", None)

        assert session.take_ui("project") == []


class TestSelections:
    """Tests for Selections."""

    def test_from_resolved(self):
        """Test resolved fields copy across and a known assignee counts as decided."""
        task = ResolvedTask(
            title="Write report",
            description="Q3",
            project_id="p1",
            assignee_id="u1",
            due_on=date(2025, 3, 5),
            due_resolved=True,
        )

        selections = Selections.from_resolved(task, "write the Q3 report for Ana")

        assert selections.title == "Write report"
        assert selections.project_id == "p1"
        assert selections.assignee_decided is True
        assert selections.due_resolved is True
        assert selections.original_message == "write the Q3 report for Ana"
        assert not selections.is_empty()
