"""GitHub webhook signature validation."""

import hashlib
import hmac
import logging

logger = logging.getLogger(__name__)

SIGNATURE_PREFIX = "sha256="


def compute_github_signature(payload: bytes, secret: str) -> str:
    """Return the ``sha256=`` prefixed HMAC SHA-256 hex digest GitHub sends."""
    return (
        SIGNATURE_PREFIX
        + hmac.new(
            secret.encode("utf-8"),
            payload,
            hashlib.sha256,
        ).hexdigest()
    )


def validate_github_signature(payload: bytes, signature: str | None, secret: str) -> bool:
    """
    Validate GitHub webhook signature using HMAC SHA-256.

    The comparison runs in constant time over the full digest.

    Args:
        payload: The raw request body bytes, exactly as received
        signature: The X-Hub-Signature-256 header value
        secret: The webhook secret configured in GitHub

    Returns:
        True if the signature is valid, False otherwise
    """
    if not signature:
        logger.warning("Missing webhook signature")
        return False

    if not signature.startswith(SIGNATURE_PREFIX):
        logger.warning("Invalid signature format - expected sha256= prefix")
        return False

    try:
        provided = signature.encode("ascii")
    except UnicodeEncodeError:
        logger.warning("Invalid signature format - non-ASCII characters")
        return False

    expected_signature = compute_github_signature(payload, secret).encode("ascii")

    is_valid = hmac.compare_digest(expected_signature, provided)

    if not is_valid:
        logger.warning("Webhook signature validation failed")

    return is_valid
