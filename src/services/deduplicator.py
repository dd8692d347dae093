"""Suppress webhook redeliveries that arrive within a short window."""

from typing import Optional

from models.webhook import WebhookEvent
from utils.cache_service import TTLCache
from utils.logging_config import get_logger

logger = get_logger(__name__)


class WebhookDeduplicator:
    """
    Best-effort, process-local duplicate filter.

    A key lives for ``window_seconds`` after first sight. It does not survive
    a restart and is not shared between execution environments.
    """

    def __init__(self, window_seconds: float = 60, cache: Optional[TTLCache] = None):
        self.window_seconds = window_seconds
        self._seen = cache or TTLCache(max_size=10_000, ttl_seconds=window_seconds)

    def should_process(self, event: WebhookEvent, now: Optional[float] = None) -> bool:
        key = event.dedup_key
        if self._seen.add_if_absent(key, now=now):
            return True
        logger.info("Duplicate webhook skipped", extra={"event_key": key})
        return False

    def release(self, event: WebhookEvent) -> None:
        """Forget an event so a redelivery is processed again."""
        self._seen.delete(event.dedup_key)

    def purge(self, now: Optional[float] = None) -> int:
        return len(self._seen.purge_expired(now))

    def __len__(self) -> int:
        return len(self._seen)
