"""Webhook handling for GitHub events."""

from review_bridge.webhook.handler import WebhookHandler, router
from review_bridge.webhook.models import WebhookRequest, WebhookResponse
from review_bridge.webhook.validator import validate_github_signature

__all__ = [
    "WebhookHandler",
    "WebhookRequest",
    "WebhookResponse",
    "router",
    "validate_github_signature",
]
