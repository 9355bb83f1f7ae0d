"""TTL-guarded read-through cache over the directory service.

The cache is process-wide and read by concurrent handlers without locking.
Data may be up to ``ttl_seconds`` old, or older while the upstream keeps
failing; callers accept that staleness.
"""

import logging
import time
from collections.abc import Callable

from taskbot.core.errors import DirectoryError
from taskbot.directory.base import DirectoryService
from taskbot.model.task import Person
from taskbot.resolution.resolver import match_person

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0


class DirectoryCache:
    """Owns the cached people list and project-to-channel mappings.

    ``refresh()`` reloads only when the TTL has expired; ``force_refresh()``
    always reloads. A failed reload keeps serving the last good copy and is
    retried on the next access. With nothing cached yet, the failure is raised
    as ``DirectoryError``.
    """

    def __init__(
        self,
        service: DirectoryService,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            service: Upstream directory.
            ttl_seconds: How long a successful load stays fresh.
            clock: Monotonic clock in seconds (injectable for tests).
        """
        self._service = service
        self._ttl = ttl_seconds
        self._clock = clock
        self._people: list[Person] | None = None
        self._mappings: dict[str, str] | None = None
        self._loaded_at: float | None = None

    @property
    def has_data(self) -> bool:
        return self._people is not None

    @property
    def is_fresh(self) -> bool:
        if self._loaded_at is None:
            return False
        return self._clock() - self._loaded_at < self._ttl

    async def refresh(self) -> None:
        """Reload if the cached copy is missing or older than the TTL."""
        if self.is_fresh:
            return
        await self.force_refresh()

    async def force_refresh(self) -> None:
        """Reload from the upstream directory now.

        Raises:
            DirectoryError: If the reload fails and nothing is cached.
        """
        try:
            people = await self._service.list_people()
            mappings = await self._service.list_project_channel_mappings()
        except DirectoryError as e:
            if self.has_data:
                logger.warning(f"Directory refresh failed, serving stale cache: {e}")
                return
            raise

        self._people = people
        self._mappings = mappings
        self._loaded_at = self._clock()
        logger.info(f"Directory cache loaded: {len(people)} people, {len(mappings)} project mappings")

    async def people(self) -> list[Person]:
        await self.refresh()
        return list(self._people or [])

    async def channel_mappings(self) -> dict[str, str]:
        await self.refresh()
        return dict(self._mappings or {})

    async def channel_for_project(self, project_id: str | None) -> str | None:
        """Slack channel mapped to a Basecamp project, if any."""
        if not project_id:
            return None
        mappings = await self.channel_mappings()
        return mappings.get(str(project_id))

    async def find_by_external_id(self, external_id: str | None) -> Person | None:
        if not external_id:
            return None
        for person in await self.people():
            if person.external_system_id == str(external_id):
                return person
        return None

    async def find_by_email(self, email: str | None) -> Person | None:
        if not email or not email.strip():
            return None
        needle = email.strip().lower()
        for person in await self.people():
            if person.email and person.email.strip().lower() == needle:
                return person
        return None

    async def find_chat_user_id(self, external_id: str | None, email: str | None) -> str | None:
        """Slack user id for a Basecamp person: stored id first, then email."""
        person = await self.find_by_external_id(external_id)
        if person is None or not person.chat_user_id:
            person = await self.find_by_email(email)
        return person.chat_user_id if person else None

    async def find_person(self, name: str) -> Person | None:
        """Look a person up by name with the assignee matching rules."""
        return match_person(name, await self.people())

    async def set_person_availability(self, person: Person, status: str) -> bool:
        """Update availability upstream and in the cached copy.

        Returns:
            True if the upstream update succeeded.
        """
        if not person.record_id:
            logger.warning(f"Cannot update availability for {person.name}: no directory record id")
            return False

        updated = await self._service.set_person_availability(person.record_id, status)
        if updated:
            for cached in self._people or []:
                if cached.record_id == person.record_id:
                    cached.availability_status = status
        return updated
