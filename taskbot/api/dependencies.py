"""FastAPI dependency injection providers."""

from collections.abc import Awaitable, Callable

from fastapi import HTTPException, Request, status

from taskbot.gateway.oauth import BasecampOAuth
from taskbot.notifications.fanout import WebhookFanout
from taskbot.stores.credentials import CredentialStore

ConnectedCallback = Callable[[str], Awaitable[None]]


def get_fanout(request: Request) -> WebhookFanout:
    """Get the webhook fan-out from app state.

    Raises:
        HTTPException: 503 if notifications are not configured.
    """
    fanout: WebhookFanout | None = getattr(request.app.state, "fanout", None)
    if fanout is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Notifications not configured")
    return fanout


def get_oauth(request: Request) -> BasecampOAuth:
    oauth: BasecampOAuth = request.app.state.oauth
    return oauth


def get_credentials(request: Request) -> CredentialStore:
    credentials: CredentialStore = request.app.state.credentials
    return credentials


def get_on_connected(request: Request) -> ConnectedCallback | None:
    """Callback run after a user connects Basecamp (e.g. a chat confirmation)."""
    return getattr(request.app.state, "on_connected", None)
