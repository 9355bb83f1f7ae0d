"""Persistent state: user credentials and task message threads."""

from taskbot.stores.credentials import CredentialStore, EncryptionService
from taskbot.stores.threads import TaskMessageRef, TaskMessageStore

__all__ = ["CredentialStore", "EncryptionService", "TaskMessageRef", "TaskMessageStore"]
