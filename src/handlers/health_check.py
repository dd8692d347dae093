"""Lightweight health check handler."""

import os
import json
from datetime import datetime, timezone

from utils.error_handling import ConfigError
from utils.logging_config import get_logger

logger = get_logger(__name__)


def _config_summary():
    """Configuration echo; a broken config is reported, not raised."""
    from services.context import get_context

    try:
        return get_context().config.public_summary()
    except ConfigError as exc:
        logger.error("Configuration invalid", extra={"error": str(exc)})
        return {"error": str(exc)}


def lambda_handler(event, context):
    """Return a simple 200 response to verify the stack is alive."""
    return {
        "statusCode": 200,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(
            {
                "status": "ok",
                "environment": os.environ.get("ENVIRONMENT", "dev"),
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "config": _config_summary(),
            }
        ),
    }
