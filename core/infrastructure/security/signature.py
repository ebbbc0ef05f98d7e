"""
Webhook signature verification.

The sender signs each delivery with HMAC-SHA256 over
notification_url + raw body and sends the base64 digest in a
header, optionally prefixed with "sha256=".
"""
import base64
import hashlib
import hmac
import logging
from typing import Mapping, Optional, Union


logger = logging.getLogger(__name__)

SIGNATURE_HEADERS = (
    "x-square-hmacsha256-signature",
    "x-square-hmac-sha256-signature",
    "x-square-signature",
    "x-signature",
)
SIGNATURE_PREFIX = "sha256="


def extract_signature(headers: Mapping[str, str]) -> Optional[str]:
    """Return the first signature header present (case-insensitive)."""
    lowered = {name.lower(): value for name, value in headers.items()}
    for name in SIGNATURE_HEADERS:
        value = lowered.get(name)
        if value and value.strip():
            return value.strip()
    return None


def compute_signature(
    body: Union[bytes, str],
    key: str,
    notification_url: Optional[str] = None,
) -> str:
    """Base64 HMAC-SHA256 of notification_url + body."""
    if isinstance(body, str):
        body = body.encode("utf-8")
    payload = (notification_url or "").encode("utf-8") + body
    digest = hmac.new(key.encode("utf-8"), payload, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_signature(
    body: Union[bytes, str],
    signature: Optional[str],
    key: Optional[str],
    notification_url: Optional[str] = None,
) -> bool:
    """
    Check a delivery's signature in constant time.

    Args:
        body: Raw request body, exactly as received
        signature: Header value, with or without the "sha256=" prefix
        key: Route signature key
        notification_url: URL the sender signed together with the body

    Returns:
        True only when both signature and key are present and match
    """
    if not signature or not key:
        return False

    provided = signature.strip()
    if provided.startswith(SIGNATURE_PREFIX):
        provided = provided[len(SIGNATURE_PREFIX):]
    if not provided:
        return False

    expected = compute_signature(body, key, notification_url)
    matched = hmac.compare_digest(provided.encode("ascii", "replace"), expected.encode("ascii"))
    if not matched:
        logger.warning(
            f"Signature mismatch (provided length={len(provided)}, expected length={len(expected)})"
        )
    return matched
