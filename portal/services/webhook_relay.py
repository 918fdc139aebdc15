"""Forward inbound webhooks to the configured automation endpoint."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from portal.core.config import Settings

logger = logging.getLogger(__name__)


class WebhookRelayError(Exception):
    """Raised when the relay target cannot be reached or the request fails in transport."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def _relay_url(settings: Settings, webhook_id: str) -> str:
    base = (settings.WEBHOOK_RELAY_URL or "").rstrip("/")
    return f"{base}/{webhook_id}"


def _response_body(response: httpx.Response) -> Any:
    """Upstream JSON body, its text wrapped in a message object, or None when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return {"message": response.text}


async def relay_webhook(
    webhook_id: str,
    payload: Any,
    settings: Settings,
) -> tuple[int, Any]:
    """
    POST payload to WEBHOOK_RELAY_URL/<webhook_id>.

    Returns (upstream status code, upstream body); the body is None when
    upstream sent none (204 and the like). Upstream error statuses are
    relayed as-is; only transport failures raise WebhookRelayError.
    """
    url = _relay_url(settings, webhook_id)
    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                url,
                json=payload,
                timeout=settings.WEBHOOK_TIMEOUT_SEC,
            )
    except httpx.TimeoutException as e:
        raise WebhookRelayError("Webhook relay timed out") from e
    except httpx.HTTPError as e:
        raise WebhookRelayError(f"Webhook relay target unreachable: {e}") from e

    logger.info(
        "Webhook relayed",
        extra={"webhook_id": webhook_id, "upstream_status": response.status_code},
    )
    return response.status_code, _response_body(response)
