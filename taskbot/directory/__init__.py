"""People/project directory and its cache."""

from taskbot.directory.airtable import AirtableDirectoryService
from taskbot.directory.base import DirectoryService
from taskbot.directory.cache import DirectoryCache

__all__ = ["AirtableDirectoryService", "DirectoryCache", "DirectoryService"]
