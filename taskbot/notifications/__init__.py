"""Slack notifications and Basecamp webhook fan-out."""

from taskbot.notifications.dispatcher import NotificationDispatcher, notify_safely
from taskbot.notifications.fanout import WebhookEvent, WebhookFanout

__all__ = ["NotificationDispatcher", "WebhookEvent", "WebhookFanout", "notify_safely"]
