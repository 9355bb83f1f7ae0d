"""Airtable-backed directory service."""

import logging
from typing import Any

import httpx

from taskbot.core.config.models import DirectoryConfig
from taskbot.core.errors import DirectoryError
from taskbot.directory.base import DirectoryService
from taskbot.model.task import Person

logger = logging.getLogger(__name__)


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class AirtableDirectoryService(DirectoryService):
    """Reads people and project mappings from two Airtable tables.

    People records carry ``name``, ``email``, ``slack_id``, ``basecamp_id``
    and ``status``. Project records map ``basecamp_id`` to ``slack_id``.
    """

    def __init__(self, config: DirectoryConfig, client: httpx.AsyncClient):
        self._config = config
        self._client = client

    @property
    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._config.api_key}"}

    def _table_url(self, table: str) -> str:
        return f"{self._config.api_url}/{self._config.base_id}/{table}"

    async def _list_records(self, table: str, view: str | None) -> list[dict[str, Any]]:
        """Fetch all records of a table, following Airtable's ``offset`` paging."""
        records: list[dict[str, Any]] = []
        params: dict[str, str] = {}
        if view:
            params["view"] = view

        while True:
            try:
                response = await self._client.get(self._table_url(table), headers=self._headers, params=params)
                response.raise_for_status()
                payload = response.json()
            except (httpx.HTTPError, ValueError) as e:
                raise DirectoryError(f"Failed to list {table}: {e}") from e

            records.extend(payload.get("records", []))
            offset = payload.get("offset")
            if not offset:
                return records
            params = {**params, "offset": offset}

    async def list_people(self) -> list[Person]:
        records = await self._list_records(self._config.people_table, self._config.people_view)
        people: list[Person] = []
        for record in records:
            fields = record.get("fields", {})
            name = _clean(fields.get("name"))
            if not name:
                continue
            people.append(
                Person(
                    name=name,
                    email=_clean(fields.get("email")) or "",
                    chat_user_id=_clean(fields.get("slack_id")),
                    external_system_id=_clean(fields.get("basecamp_id")),
                    availability_status=_clean(fields.get("status")),
                    record_id=_clean(record.get("id")),
                )
            )
        logger.debug(f"Loaded {len(people)} people from Airtable")
        return people

    async def list_project_channel_mappings(self) -> dict[str, str]:
        records = await self._list_records(self._config.projects_table, self._config.projects_view)
        mappings: dict[str, str] = {}
        for record in records:
            fields = record.get("fields", {})
            project_id = _clean(fields.get("basecamp_id"))
            channel_id = _clean(fields.get("slack_id"))
            if project_id and channel_id:
                mappings[project_id] = channel_id
        logger.debug(f"Loaded {len(mappings)} project channel mappings from Airtable")
        return mappings

    async def set_person_availability(self, record_id: str, status: str) -> bool:
        url = f"{self._table_url(self._config.people_table)}/{record_id}"
        try:
            response = await self._client.patch(
                url,
                headers=self._headers,
                json={"fields": {"status": status}},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Failed to update availability for {record_id}: {e}")
            return False
        logger.info(f"Set availability of {record_id} to '{status}'")
        return True
