"""taskbot - conversational Basecamp task creation over Telegram."""

__version__ = "0.1.0"
