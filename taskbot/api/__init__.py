"""HTTP API: Basecamp webhooks and the OAuth callback."""

from taskbot.api.app import create_app

__all__ = ["create_app"]
