"""Handler for GET /api/just-qualified/{customerId}."""

import json
from datetime import datetime, timezone

from utils.logging_config import get_logger
from utils.validators import parse_positive_int

logger = get_logger(__name__)


def _get_context():
    """Lazy-load the service context."""
    from services.context import get_context

    return get_context()


def _customer_id(event):
    path_params = event.get("pathParameters") or {}
    raw = path_params.get("customerId")
    if raw is None:
        path = event.get("requestContext", {}).get("http", {}).get("path", "")
        raw = path.rstrip("/").rsplit("/", 1)[-1]
    return parse_positive_int(raw)


def lambda_handler(event, context):
    """Tell the storefront whether to show the "you just qualified" popup."""
    customer_id = _customer_id(event)
    if customer_id is None:
        return {
            "statusCode": 400,
            "headers": {"Content-Type": "application/json"},
            "body": json.dumps({"message": "customerId must be a positive integer"}),
        }

    ctx = _get_context()
    now = datetime.now(timezone.utc)
    ctx.recency.evict_expired(now)
    status = ctx.popup.check(customer_id, now)

    return {
        "statusCode": 200,
        "headers": {"Content-Type": "application/json"},
        "body": status.to_json(),
    }
