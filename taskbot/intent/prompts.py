"""Prompt template for task intent extraction."""

from collections.abc import Sequence
from datetime import date

from taskbot.model.task import Person, ProjectRef

EXTRACTION_PROMPT = """You are a task management assistant. Read the user message below (a client \
request, bug report, feature request or a description of work) and turn it into Basecamp to-dos.

First decide whether the message describes ONE task or SEVERAL separate tasks.

Lines written as "Name - task one. task two." assign every task on that line to Name, \
until the next "Name - ..." line. Each sentence on such a line is its own task.

Known projects:
{projects}

Known people:
{people}

Today's date is {today}.

For every task produce:
- "title": a clear, actionable title (max 80 characters)
- "description": a detailed description with all relevant context
- "project_name": the matching project from the list above, or null
- "assignee_names": list of people from the list above the task is for (may be empty)
- "due_date": the due date as YYYY-MM-DD if one is stated or implied, or null

For ONE task reply with:
{{"title": "...", "description": "...", "project_name": null, "assignee_names": [], "due_date": null}}

For SEVERAL tasks reply with:
{{"tasks": [{{"title": "...", "description": "...", "project_name": null, "assignee_names": [], "due_date": null}}]}}

IMPORTANT: Return ONLY the raw JSON object. No markdown, no code fences, no commentary.

User message: "{message}"
"""


def _enumerate_projects(projects: Sequence[ProjectRef]) -> str:
    if not projects:
        return "- (none available)"
    return "\n".join(f"- {p.name}" for p in projects)


def _enumerate_people(people: Sequence[Person]) -> str:
    if not people:
        return "- (none available)"
    return "\n".join(f"- {p.name} <{p.email}>" for p in people)


def build_extraction_prompt(
    message: str,
    projects: Sequence[ProjectRef],
    people: Sequence[Person],
    today: date,
) -> str:
    """Render the extraction prompt with the directory context inlined."""
    return EXTRACTION_PROMPT.format(
        projects=_enumerate_projects(projects),
        people=_enumerate_people(people),
        today=today.isoformat(),
        message=message.replace('"', '\\"'),
    )
