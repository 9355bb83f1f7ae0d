"""Basecamp OAuth callback."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse

from taskbot.api.dependencies import ConnectedCallback, get_credentials, get_oauth, get_on_connected
from taskbot.core.errors import GatewayError
from taskbot.gateway.oauth import BasecampOAuth
from taskbot.stores.credentials import CredentialStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/oauth", tags=["oauth"])


@router.get("/callback", response_class=PlainTextResponse)
async def oauth_callback(
    oauth: Annotated[BasecampOAuth, Depends(get_oauth)],
    credentials: Annotated[CredentialStore, Depends(get_credentials)],
    on_connected: Annotated[ConnectedCallback | None, Depends(get_on_connected)],
    code: str | None = None,
    state: str | None = None,
) -> PlainTextResponse:
    """Finish the connect flow started from the chat's authorization link.

    ``state`` carries the chat user id the credential is stored under.
    """
    if not code or not state:
        return PlainTextResponse("Missing code or state.", status_code=status.HTTP_400_BAD_REQUEST)

    try:
        credential = await oauth.exchange_code(code)
    except GatewayError as e:
        logger.error(f"OAuth exchange failed for user {state}: {e}")
        return PlainTextResponse("OAuth failed.", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    credentials.set(state, credential)
    if on_connected is not None:
        await on_connected(state)
    return PlainTextResponse("Connected. You can return to Telegram.")
