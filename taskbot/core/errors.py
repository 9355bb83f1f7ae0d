"""Exception taxonomy for taskbot.

Name-resolution misses are not exceptions: they are represented as absent
optional fields on ``ResolvedTask`` and filled in interactively.
"""


class TaskBotError(Exception):
    """Base class for all taskbot errors."""


class ExtractionError(TaskBotError):
    """The language model call failed or returned an unusable structure.

    Always recovered locally by the extractor's deterministic fallback.
    """


class GatewayError(TaskBotError):
    """A Basecamp API call failed (network, auth, 4xx/5xx)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DirectoryError(TaskBotError):
    """The people/project directory is unavailable and no cached copy exists."""


class NotificationError(TaskBotError):
    """A Slack send failed. Callers log and swallow it."""
