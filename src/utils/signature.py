"""
Authenticity checks for inbound webhooks.

Two header forms are accepted, both tied to the configured secret:

- ``X-Webhook-Signature``: base64(HMAC-SHA256(secret, raw body)), for
  senders or relays that sign each delivery.
- ``X-Webhook-Token``: the secret itself, for senders that can only attach
  static headers to a hook registration.
"""

import base64
import hashlib
import hmac
from typing import Optional

from utils.error_handling import SignatureError

SIGNATURE_HEADER = "x-webhook-signature"
TOKEN_HEADER = "x-webhook-token"


def sign(secret: str, raw: bytes) -> str:
    """Return base64(HMAC-SHA256(secret, raw))."""
    digest = hmac.new(secret.encode(), raw, hashlib.sha256).digest()
    return base64.b64encode(digest).decode()


def header_value(headers: Optional[dict], name: str) -> Optional[str]:
    """Case-insensitive header lookup on an API Gateway event."""
    for key, value in (headers or {}).items():
        if key.lower() == name:
            return value
    return None


def verify_request(secret: str, raw: bytes, headers: Optional[dict]) -> None:
    """Raise SignatureError unless a signature or token header matches."""
    signature = header_value(headers, SIGNATURE_HEADER)
    if signature:
        if hmac.compare_digest(sign(secret, raw), signature.strip()):
            return
        raise SignatureError()

    token = header_value(headers, TOKEN_HEADER)
    if token:
        if hmac.compare_digest(secret.encode(), token.strip().encode()):
            return
        raise SignatureError("Invalid webhook token")

    raise SignatureError("Missing webhook signature")
