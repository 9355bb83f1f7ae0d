"""FastAPI application factory for the webhook and OAuth server."""

from fastapi import FastAPI

from taskbot import __version__
from taskbot.api.dependencies import ConnectedCallback
from taskbot.api.routes.oauth import router as oauth_router
from taskbot.api.routes.webhooks import router as webhooks_router
from taskbot.api.schemas import HealthResponse
from taskbot.gateway.oauth import BasecampOAuth
from taskbot.notifications.fanout import WebhookFanout
from taskbot.stores.credentials import CredentialStore


def create_app(
    oauth: BasecampOAuth,
    credentials: CredentialStore,
    fanout: WebhookFanout | None = None,
    on_connected: ConnectedCallback | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        oauth: Basecamp OAuth client used by the callback route.
        credentials: Store the callback writes connected users into.
        fanout: Webhook fan-out; None disables webhook processing (503).
        on_connected: Awaited with the chat user id after a successful connect.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="taskbot",
        description="Basecamp webhooks and OAuth callback for the task bot",
        version=__version__,
    )

    app.state.oauth = oauth
    app.state.credentials = credentials
    app.state.fanout = fanout
    app.state.on_connected = on_connected

    app.include_router(webhooks_router)
    app.include_router(oauth_router)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse()

    return app
