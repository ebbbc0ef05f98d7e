"""Unit tests for webhook signature verification."""
import base64
import hashlib
import hmac

from core.infrastructure.security import compute_signature, extract_signature, verify_signature


BODY = b'{"type":"inventory.count.updated","data":{}}'
KEY = "signature-key"


def test_compute_signature_is_base64_hmac_of_body():
    expected = base64.b64encode(hmac.new(KEY.encode(), BODY, hashlib.sha256).digest()).decode()

    assert compute_signature(BODY, KEY) == expected


def test_notification_url_is_prepended_when_configured():
    url = "https://sync.example.com/api/v1/webhooks/inventory"
    signature = compute_signature(BODY, KEY, url)

    assert verify_signature(BODY, signature, KEY, url)
    assert not verify_signature(BODY, signature, KEY)


def test_verify_accepts_sha256_prefix():
    signature = "sha256=" + compute_signature(BODY, KEY)

    assert verify_signature(BODY, signature, KEY)


def test_verify_rejects_tampered_body_wrong_key_and_missing_values():
    signature = compute_signature(BODY, KEY)

    assert not verify_signature(BODY + b" ", signature, KEY)
    assert not verify_signature(BODY, signature, "other-key")
    assert not verify_signature(BODY, None, KEY)
    assert not verify_signature(BODY, signature, None)
    assert not verify_signature(BODY, "sha256=", KEY)


def test_extract_signature_is_case_insensitive():
    assert extract_signature({"X-Square-HmacSha256-Signature": " abc "}) == "abc"
    assert extract_signature({"x-signature": "def"}) == "def"
    assert extract_signature({"content-type": "application/json"}) is None
