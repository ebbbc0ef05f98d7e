"""Webhook authentication."""

from .signature import (
    SIGNATURE_HEADERS,
    compute_signature,
    extract_signature,
    verify_signature,
)

__all__ = [
    "SIGNATURE_HEADERS",
    "compute_signature",
    "extract_signature",
    "verify_signature",
]
