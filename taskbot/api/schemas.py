"""Response schemas for the HTTP API."""

from pydantic import BaseModel, Field


class WebhookAck(BaseModel):
    """Acknowledgement returned to Basecamp for every webhook delivery."""

    status: str = Field(description="'accepted' or 'ignored'")
    kind: str | None = Field(default=None, description="Event kind from the payload")


class HealthResponse(BaseModel):
    """Liveness probe response."""

    status: str = Field(default="ok")
