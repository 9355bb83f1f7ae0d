"""Per-user Basecamp OAuth credential."""

from dataclasses import dataclass
from typing import Any


@dataclass
class UserCredential:
    """OAuth tokens and account for one chat user.

    Attributes:
        access_token: Bearer token for Basecamp API calls.
        refresh_token: Refresh token, if issued.
        account_id: Basecamp account the user authorized.
        platform: Chat platform the user came from.
    """

    access_token: str
    account_id: str
    refresh_token: str | None = None
    platform: str = "telegram"

    def to_dict(self) -> dict[str, Any]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "account_id": self.account_id,
            "platform": self.platform,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserCredential":
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            account_id=str(data["account_id"]),
            platform=data.get("platform", "telegram"),
        )
