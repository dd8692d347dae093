"""
Handler for POST /webhook.

Store webhooks are acknowledged with 200 whenever processing finished or
was deliberately skipped (duplicate, guest order, unknown scope, malformed
payload). Only an unexpected failure answers 500, which makes the store
redeliver.
"""

from __future__ import annotations

import base64
import json
import uuid

from pydantic import ValidationError as PydanticValidationError

from models.webhook import WebhookEvent
from utils.error_handling import DirectoryError, SignatureError, to_response
from utils.logging_config import get_logger
from utils.signature import verify_request

logger = get_logger(__name__)


def _get_context():
    """Lazy-load the service context."""
    from services.context import get_context

    return get_context()


def _json(status: int, body: dict) -> dict:
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def _raw_body(event) -> bytes:
    body = event.get("body") or ""
    if event.get("isBase64Encoded"):
        return base64.b64decode(body)
    return body.encode()


def _parse_event(raw: bytes):
    try:
        return WebhookEvent.model_validate(json.loads(raw or b"{}"))
    except (json.JSONDecodeError, UnicodeDecodeError, PydanticValidationError) as exc:
        logger.warning("Malformed webhook payload", extra={"error": str(exc)})
        return None


def lambda_handler(event, context):
    """Gate, deduplicate and process one store webhook."""
    correlation_id = str(uuid.uuid4())
    ctx = _get_context()
    raw = _raw_body(event)

    if ctx.config.webhook_secret:
        try:
            verify_request(ctx.config.webhook_secret, raw, event.get("headers"))
        except SignatureError as exc:
            logger.warning(
                "Rejected webhook signature",
                extra={"correlation_id": correlation_id, "error": str(exc)},
            )
            return to_response(exc)
    else:
        logger.warning("Webhook secret not configured; signature not checked")

    webhook_event = _parse_event(raw)
    if webhook_event is None:
        return _json(200, {"status": "ignored", "reason": "malformed payload"})

    if not ctx.deduplicator.should_process(webhook_event):
        return _json(200, {"status": "duplicate"})

    logger.info(
        "Webhook received",
        extra={
            "correlation_id": correlation_id,
            "scope": webhook_event.scope,
            "event_key": webhook_event.dedup_key,
        },
    )

    try:
        outcome = ctx.processor.process(webhook_event)
    except Exception as exc:  # the store retries on 5xx
        ctx.deduplicator.release(webhook_event)
        extra = {"correlation_id": correlation_id, "error": str(exc)}
        if isinstance(exc, DirectoryError):
            extra["status"] = exc.upstream_status
            extra["detail"] = exc.detail
        logger.exception("Webhook processing failed", extra=extra)
        return _json(500, {"status": "error", "correlation_id": correlation_id})

    return _json(200, outcome.as_dict())
