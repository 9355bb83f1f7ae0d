"""Basecamp API access."""

from taskbot.gateway.basecamp import DEFAULT_TODO_LIST_NAME, BasecampGateway
from taskbot.gateway.oauth import BasecampOAuth

__all__ = ["DEFAULT_TODO_LIST_NAME", "BasecampGateway", "BasecampOAuth"]
