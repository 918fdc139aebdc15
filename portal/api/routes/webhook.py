"""Webhook endpoint: relay inbound payloads to the automation service."""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from portal.core.config import get_settings
from portal.schemas.webhook import WebhookAck
from portal.services.webhook_relay import WebhookRelayError, relay_webhook

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/webhook/{webhook_id}", response_model=None)
async def receive_webhook(webhook_id: str, request: Request) -> Response:
    """
    Forward the JSON body to WEBHOOK_RELAY_URL/<webhook_id> and relay the
    upstream status and JSON body (no body when upstream sent none). Without a relay target, acknowledge locally.
    """
    try:
        payload = await request.json()
    except ValueError:
        payload = None

    settings = get_settings()
    if not settings.WEBHOOK_RELAY_URL:
        logger.info(
            "Webhook received (no relay target configured)",
            extra={"webhook_id": webhook_id},
        )
        ack = WebhookAck(
            message="Webhook received",
            webhook_id=webhook_id,
            timestamp=datetime.now(UTC),
            received_data=payload,
        )
        return JSONResponse(status_code=200, content=ack.model_dump(mode="json", by_alias=True))

    try:
        status_code, body = await relay_webhook(webhook_id, payload, settings)
    except WebhookRelayError as e:
        logger.error(
            "Webhook relay failed",
            extra={"webhook_id": webhook_id, "reason": e.message[:500]},
        )
        return JSONResponse(
            status_code=500,
            content={"error": "WebhookRelayFailed", "message": "Error relaying webhook"},
        )
    if body is None:
        return Response(status_code=status_code)
    return JSONResponse(status_code=status_code, content=body)
