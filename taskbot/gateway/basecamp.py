"""Authenticated Basecamp 3 API client.

All ids leave this module as strings. Every transport failure, HTTP error
or malformed body is raised as ``GatewayError`` carrying the status code
when there is one.
"""

import logging
from datetime import date
from typing import Any

import httpx

from taskbot.core.config.models import BasecampConfig
from taskbot.core.errors import GatewayError
from taskbot.model.credential import UserCredential
from taskbot.model.task import Member, ProjectRef, TodoList, WorkItem

logger = logging.getLogger(__name__)

DEFAULT_TODO_LIST_NAME = "Tasks"
DEFAULT_TODO_LIST_DESCRIPTION = "Default to-do list created automatically"

# Raised when a 2xx body is valid JSON but not the expected shape
_SHAPE_ERRORS = (KeyError, TypeError, AttributeError)


def _member(raw: dict[str, Any]) -> Member:
    return Member(
        id=str(raw["id"]),
        name=raw.get("name") or "",
        email=raw.get("email_address") or raw.get("email"),
    )


def _todo_list(raw: dict[str, Any]) -> TodoList:
    return TodoList(
        id=str(raw["id"]),
        name=raw.get("name") or raw.get("title") or "",
        status=raw.get("status"),
    )


def _malformed(what: str, e: Exception) -> GatewayError:
    logger.error(f"Unexpected Basecamp response shape for {what}: {e!r}")
    return GatewayError(f"Malformed Basecamp response for {what}")


def _members(raw: list[dict[str, Any]], what: str) -> list[Member]:
    try:
        return [_member(item) for item in raw]
    except _SHAPE_ERRORS as e:
        raise _malformed(what, e) from e


def _decode(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise GatewayError(f"Invalid JSON from {response.request.method} {response.request.url}") from e


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        logger.warning(f"Ignoring unparseable due_on from Basecamp: {value}")
        return None


class BasecampGateway:
    """Basecamp API client for one user's credential."""

    def __init__(self, credential: UserCredential, client: httpx.AsyncClient, config: BasecampConfig):
        """Initialize the gateway.

        Args:
            credential: The end user's OAuth credential.
            client: Shared HTTP client.
            config: Basecamp API settings (root URL, User-Agent).
        """
        self._credential = credential
        self._client = client
        self._config = config
        self._base_url = f"{config.api_base.rstrip('/')}/{credential.account_id}"

    @property
    def account_id(self) -> str:
        return self._credential.account_id

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._credential.access_token}",
            "User-Agent": self._config.user_agent,
            "Accept": "application/json",
        }

    async def _request(self, method: str, url: str, json: dict[str, Any] | None = None) -> httpx.Response:
        if not url.startswith("http"):
            url = f"{self._base_url}{url}"
        try:
            response = await self._client.request(
                method,
                url,
                headers=self._headers,
                json=json,
                timeout=self._config.timeout_seconds,
            )
        except httpx.HTTPError as e:
            raise GatewayError(f"{method} {url} failed: {e}") from e

        if response.is_error:
            logger.error(f"Basecamp {method} {url} returned {response.status_code}: {response.text[:500]}")
            raise GatewayError(
                f"Basecamp returned {response.status_code} for {method} {url}",
                status_code=response.status_code,
            )
        return response

    async def _get_json(self, url: str) -> Any:
        return _decode(await self._request("GET", url))

    async def _get_all(self, url: str) -> list[dict[str, Any]]:
        """GET a list endpoint, following ``Link: <...>; rel="next"`` pages."""
        items: list[dict[str, Any]] = []
        next_url: str | None = url
        while next_url:
            response = await self._request("GET", next_url)
            items.extend(_decode(response))
            next_url = response.links.get("next", {}).get("url")
        return items

    async def list_projects(self) -> list[ProjectRef]:
        """List the account's active projects."""
        raw = await self._get_all("/projects.json")
        try:
            projects = [ProjectRef(id=str(p["id"]), name=p.get("name") or "") for p in raw]
        except _SHAPE_ERRORS as e:
            raise _malformed("projects", e) from e
        logger.debug(f"Listed {len(projects)} projects for account {self.account_id}")
        return projects

    async def get_project(self, project_id: str) -> dict[str, Any]:
        """Fetch a project record, including its dock."""
        return await self._get_json(f"/projects/{project_id}.json")

    async def _todoset_id(self, project_id: str) -> str:
        project = await self.get_project(project_id)
        try:
            for tool in project.get("dock") or []:
                if tool.get("name") == "todoset":
                    return str(tool["id"])
        except _SHAPE_ERRORS as e:
            raise _malformed(f"project {project_id}", e) from e
        raise GatewayError(f"Project {project_id} has no to-do set (to-dos may be disabled)")

    async def list_todo_lists(self, project_id: str) -> list[TodoList]:
        """List the to-do lists in a project's to-do set."""
        todoset_id = await self._todoset_id(project_id)
        raw = await self._get_all(f"/buckets/{project_id}/todosets/{todoset_id}/todolists.json")
        try:
            return [_todo_list(item) for item in raw]
        except _SHAPE_ERRORS as e:
            raise _malformed(f"to-do lists of project {project_id}", e) from e

    async def create_todo_list(self, project_id: str, name: str = DEFAULT_TODO_LIST_NAME) -> TodoList:
        """Create a to-do list in the project's to-do set."""
        todoset_id = await self._todoset_id(project_id)
        response = await self._request(
            "POST",
            f"/buckets/{project_id}/todosets/{todoset_id}/todolists.json",
            json={"name": name, "description": DEFAULT_TODO_LIST_DESCRIPTION},
        )
        try:
            todo_list = _todo_list(_decode(response))
        except _SHAPE_ERRORS as e:
            raise _malformed("created to-do list", e) from e
        logger.info(f"Created to-do list '{todo_list.name}' ({todo_list.id}) in project {project_id}")
        return todo_list

    async def list_project_members(self, project_id: str) -> list[Member]:
        raw = await self._get_all(f"/projects/{project_id}/people.json")
        return _members(raw, f"people of project {project_id}")

    async def list_workspace_members(self) -> list[Member]:
        raw = await self._get_all("/people.json")
        return _members(raw, "account people")

    async def create_todo(
        self,
        project_id: str,
        todo_list_id: str,
        title: str,
        description: str | None = None,
        assignee_ids: list[str] | None = None,
        due_on: date | None = None,
    ) -> WorkItem:
        """Create a to-do.

        Returns:
            The created work item as reported back by Basecamp.
        """
        payload: dict[str, Any] = {
            "content": title,
            "assignee_ids": [int(a) if a.isdigit() else a for a in (assignee_ids or [])],
        }
        if description:
            payload["description"] = description
        if due_on:
            payload["due_on"] = due_on.isoformat()

        logger.info(
            f"Creating to-do '{title}' in project {project_id}, list {todo_list_id} "
            f"(assignees={payload['assignee_ids']}, due_on={payload.get('due_on')})"
        )
        response = await self._request(
            "POST",
            f"/buckets/{project_id}/todolists/{todo_list_id}/todos.json",
            json=payload,
        )
        data = _decode(response)
        try:
            return WorkItem(
                id=str(data["id"]),
                title=data.get("content") or title,
                description=data.get("description") or description or "",
                url=data.get("app_url") or "",
                assignees=[_member(a) for a in data.get("assignees") or []],
                due_on=_parse_date(data.get("due_on")),
                project_id=str(project_id),
            )
        except _SHAPE_ERRORS as e:
            raise _malformed("created to-do", e) from e
