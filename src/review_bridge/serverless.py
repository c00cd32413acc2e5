"""Adapter for function-as-a-service hosts (AWS Lambda, Netlify style events)."""

import asyncio
import base64
import binascii
import logging
from typing import Any

from review_bridge.config import get_settings
from review_bridge.webhook import WebhookHandler, WebhookRequest

logger = logging.getLogger(__name__)


def _raw_body(event: dict[str, Any]) -> bytes:
    """
    Return the request body bytes.

    A body flagged as base64 that does not decode is passed on as received, so
    the secret and signature gates still decide the response.
    """
    body = event.get("body") or ""
    is_b64 = event.get("isBase64Encoded", False)
    if isinstance(is_b64, str):
        is_b64 = is_b64.lower() == "true"
    if not is_b64:
        return body.encode("utf-8")
    try:
        return base64.b64decode(body)
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Could not decode base64 body: {e}")
        return body.encode("utf-8")


def lambda_handler(event: dict[str, Any], _context: Any = None) -> dict[str, Any]:
    """Run the webhook pipeline for a single function invocation."""
    request = WebhookRequest.from_raw(event.get("headers") or {}, _raw_body(event))
    result = asyncio.run(WebhookHandler(get_settings()).handle(request))
    return {"statusCode": result.status_code, "body": result.body}
