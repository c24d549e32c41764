"""GitHub webhook signature validation."""

import hashlib
import hmac
import logging

logger = logging.getLogger(__name__)

# GitHub's legacy X-Hub-Signature header carries an HMAC-SHA1 digest
SIGNATURE_PREFIX = "sha1="


def compute_signature(payload: bytes, secret: str) -> str:
    """Return the X-Hub-Signature value GitHub would send for this payload."""
    return (
        SIGNATURE_PREFIX
        + hmac.new(
            secret.encode("utf-8"),
            payload,
            hashlib.sha1,
        ).hexdigest()
    )


def validate_github_signature(payload: bytes, signature: str | None, secret: str) -> bool:
    """
    Validate GitHub webhook signature using HMAC SHA-1.

    Args:
        payload: The raw request body bytes, exactly as received
        signature: The X-Hub-Signature header value
        secret: The webhook secret configured in GitHub

    Returns:
        True if the signature is valid, False otherwise
    """
    if not signature:
        return False

    if len(signature) < len(SIGNATURE_PREFIX) or not signature.startswith(SIGNATURE_PREFIX):
        logger.warning("Malformed signature - expected sha1= prefix")
        return False

    received = signature[len(SIGNATURE_PREFIX) :]
    expected = compute_signature(payload, secret)[len(SIGNATURE_PREFIX) :]

    return hmac.compare_digest(expected.encode("utf-8"), received.encode("utf-8"))
