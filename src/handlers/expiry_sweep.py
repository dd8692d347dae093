"""
Expiry sweep handler, invoked by EventBridge once a day and once after each
deployment.
"""

from datetime import datetime, timezone

from utils.logging_config import get_logger

logger = get_logger(__name__)


def _get_context():
    """Lazy-load the service context."""
    from services.context import get_context

    return get_context()


def lambda_handler(event, context):
    """Demote every customer whose discount window has elapsed."""
    ctx = _get_context()
    now = datetime.now(timezone.utc)
    evicted = ctx.recency.evict_expired(now)
    ctx.deduplicator.purge()

    try:
        result = ctx.sweeper.sweep(now)
    except Exception as exc:
        logger.exception("Expiry check failed", extra={"error": str(exc)})
        return {"status": "error", "error": str(exc)}

    return {
        "status": "ok",
        "scanned": result.scanned,
        "demoted": result.demoted,
        "failed": result.failed,
        "popup_flags_evicted": evicted,
    }
