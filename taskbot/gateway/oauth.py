"""Basecamp (Launchpad) OAuth web-server flow."""

import logging
from urllib.parse import urlencode

import httpx

from taskbot.core.config.models import BasecampConfig
from taskbot.core.errors import GatewayError
from taskbot.model.credential import UserCredential

logger = logging.getLogger(__name__)


class BasecampOAuth:
    """Builds authorization links and exchanges callback codes for credentials."""

    def __init__(self, config: BasecampConfig, client: httpx.AsyncClient):
        self._config = config
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self._config.client_id and self._config.client_secret and self._config.redirect_uri)

    def authorization_url(self, state: str) -> str:
        """Authorization link for a user; ``state`` carries their chat user id."""
        query = urlencode(
            {
                "type": "web_server",
                "client_id": self._config.client_id or "",
                "redirect_uri": self._config.redirect_uri or "",
                "state": state,
            }
        )
        return f"{self._config.launchpad_base}/authorization/new?{query}"

    async def exchange_code(self, code: str) -> UserCredential:
        """Exchange an authorization code and discover the account id.

        Raises:
            GatewayError: If the token exchange or account discovery fails.
        """
        token_url = f"{self._config.launchpad_base}/authorization/token?type=web_server"
        try:
            response = await self._client.post(
                token_url,
                data={
                    "client_id": self._config.client_id or "",
                    "client_secret": self._config.client_secret or "",
                    "redirect_uri": self._config.redirect_uri or "",
                    "code": code,
                },
            )
            response.raise_for_status()
            token = response.json()
        except httpx.HTTPStatusError as e:
            raise GatewayError("Token exchange failed", status_code=e.response.status_code) from e
        except (httpx.HTTPError, ValueError) as e:
            raise GatewayError(f"Token exchange failed: {e}") from e

        access_token = token.get("access_token")
        if not access_token:
            raise GatewayError("Token exchange returned no access token")

        account_id = await self._account_id(access_token)
        logger.info(f"OAuth exchange complete for account {account_id}")
        return UserCredential(
            access_token=access_token,
            account_id=account_id,
            refresh_token=token.get("refresh_token"),
        )

    async def _account_id(self, access_token: str) -> str:
        try:
            response = await self._client.get(
                f"{self._config.launchpad_base}/authorization.json",
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Accept": "application/json",
                    "User-Agent": self._config.user_agent,
                },
            )
            response.raise_for_status()
            auth = response.json()
        except httpx.HTTPStatusError as e:
            raise GatewayError("Account discovery failed", status_code=e.response.status_code) from e
        except (httpx.HTTPError, ValueError) as e:
            raise GatewayError(f"Account discovery failed: {e}") from e

        accounts = auth.get("accounts")
        if isinstance(accounts, list) and accounts:
            return str(accounts[0]["id"])
        if isinstance(accounts, dict) and "id" in accounts:
            return str(accounts["id"])
        raise GatewayError("Authorization has no Basecamp accounts")
