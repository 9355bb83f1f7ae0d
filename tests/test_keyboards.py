"""Tests for wizard keyboards and callback parsing."""

import pytest

from taskbot.conversation.keyboards import (
    PEOPLE_PER_PAGE,
    PROJECTS_PER_PAGE,
    Callback,
    clamp_page,
    confirm_keyboard,
    page_count,
    parse_callback,
    person_keyboard,
    project_keyboard,
    todo_list_keyboard,
)
from taskbot.model.task import Member, ProjectRef, TodoList


def _projects(n):
    return [ProjectRef(id=str(i), name=f"Project {i}") for i in range(n)]


class TestParseCallback:
    """Tests for callback parsing."""

    @pytest.mark.parametrize(
        "data,expected",
        [
            ("confirm_task", Callback("confirm")),
            ("rewrite_task", Callback("rewrite")),
            ("person_none", Callback("person")),
            ("project_123", Callback("project", value="123")),
            ("project_page_2", Callback("project", page=2)),
            ("list_77", Callback("list", value="77")),
            ("list_page_0", Callback("list", page=0)),
            ("person_501", Callback("person", value="501")),
            ("person_page_1", Callback("person", page=1)),
        ],
    )
    def test_known_callbacks(self, data, expected):
        """Test each callback shape parses."""
        assert parse_callback(data) == expected

    @pytest.mark.parametrize("data", ["", "invoice_1", "project_", "something"])
    def test_unknown_callbacks(self, data):
        """Test unknown data yields None."""
        assert parse_callback(data) is None

    def test_is_page(self):
        """Test pagination callbacks are flagged."""
        assert parse_callback("project_page_1").is_page is True
        assert parse_callback("project_1").is_page is False


class TestPagination:
    """Tests for page math."""

    def test_page_count(self):
        """Test page counts round up and never drop below one."""
        assert page_count(0, 8) == 1
        assert page_count(8, 8) == 1
        assert page_count(9, 8) == 2

    def test_clamp_page(self):
        """Test out-of-range pages are clamped."""
        assert clamp_page(-1, 20, 8) == 0
        assert clamp_page(5, 20, 8) == 2


class TestKeyboards:
    """Tests for keyboard layouts."""

    def test_confirm_keyboard(self):
        """Test confirm and rewrite share one row."""
        keyboard = confirm_keyboard()

        assert [b.data for b in keyboard[0]] == ["confirm_task", "rewrite_task"]

    def test_single_page_has_no_nav(self):
        """Test a short list renders without navigation."""
        keyboard = project_keyboard(_projects(3))

        assert [row[0].data for row in keyboard] == ["project_0", "project_1", "project_2"]

    def test_first_page_has_next_only(self):
        """Test page 0 offers Next but not Previous."""
        keyboard = project_keyboard(_projects(20))

        assert len(keyboard) == PROJECTS_PER_PAGE + 1
        assert [b.data for b in keyboard[-1]] == ["project_page_1"]

    def test_middle_page_has_both(self):
        """Test a middle page offers both directions."""
        keyboard = project_keyboard(_projects(20), page=1)

        assert keyboard[0][0].data == "project_8"
        assert [b.data for b in keyboard[-1]] == ["project_page_0", "project_page_2"]

    def test_last_page_has_previous_only(self):
        """Test the last page offers Previous only."""
        keyboard = project_keyboard(_projects(20), page=2)

        assert len(keyboard) == 5
        assert [b.data for b in keyboard[-1]] == ["project_page_1"]

    def test_todo_list_keyboard(self):
        """Test list buttons use the list_ prefix."""
        keyboard = todo_list_keyboard([TodoList(id="7", name="Backlog")])

        assert keyboard == [[keyboard[0][0]]]
        assert keyboard[0][0].data == "list_7"
        assert keyboard[0][0].text == "Backlog"

    def test_person_keyboard_leads_with_no_assignee(self):
        """Test the explicit 'no assignee' choice comes first."""
        people = [Member(id=str(i), name=f"Person {i}") for i in range(10)]

        keyboard = person_keyboard(people)

        assert keyboard[0][0].data == "person_none"
        assert len(keyboard) == 1 + PEOPLE_PER_PAGE + 1
