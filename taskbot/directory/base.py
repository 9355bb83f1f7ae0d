"""Directory service interface."""

from abc import ABC, abstractmethod

from taskbot.model.task import Person


class DirectoryService(ABC):
    """Upstream people/project reference data.

    Implementations talk to the real directory; ``DirectoryCache`` sits in
    front of one and is what the rest of the bot uses.
    """

    @abstractmethod
    async def list_people(self) -> list[Person]:
        """Return every person record."""
        ...

    @abstractmethod
    async def list_project_channel_mappings(self) -> dict[str, str]:
        """Return Basecamp project id -> Slack channel id."""
        ...

    @abstractmethod
    async def set_person_availability(self, record_id: str, status: str) -> bool:
        """Update a person's availability status.

        Returns:
            True if the upstream record was updated.
        """
        ...
