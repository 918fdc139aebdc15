"""Schemas for the webhook endpoint."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class WebhookAck(BaseModel):
    """Local acknowledgement returned when no relay target is configured."""

    success: bool = True
    message: str
    webhook_id: str = Field(alias="webhookId")
    timestamp: datetime
    received_data: Any = Field(default=None, alias="receivedData")

    class Config:
        populate_by_name = True
