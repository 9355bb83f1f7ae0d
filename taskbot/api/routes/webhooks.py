"""Basecamp webhook receiver."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, BackgroundTasks, Body, Depends

from taskbot.api.dependencies import get_fanout
from taskbot.api.schemas import WebhookAck
from taskbot.notifications.fanout import HANDLED_KINDS, WebhookFanout

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/basecamp", tags=["webhooks"])


@router.post("/webhook", response_model=WebhookAck)
async def receive_webhook(
    payload: Annotated[dict[str, Any], Body()],
    background_tasks: BackgroundTasks,
    fanout: Annotated[WebhookFanout, Depends(get_fanout)],
) -> WebhookAck:
    """Accept a Basecamp event and fan it out after responding.

    Basecamp only needs a quick 2xx; Slack delivery happens in the
    background.

    Args:
        payload: Raw Basecamp webhook body.
        background_tasks: FastAPI background task queue.
        fanout: Webhook fan-out service.

    Returns:
        WebhookAck: Whether the event kind will be processed.
    """
    kind = payload.get("kind")
    if kind not in HANDLED_KINDS:
        logger.debug(f"Ignoring Basecamp webhook kind '{kind}'")
        return WebhookAck(status="ignored", kind=kind)

    background_tasks.add_task(fanout.handle, payload)
    return WebhookAck(status="accepted", kind=kind)
