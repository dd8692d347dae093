"""
Recency tracking for the storefront "just qualified" popup.

Two modes exist:

- ``tracked``: a one-shot mark is stored when a customer qualifies and is
  consumed by the first popup check.
- ``record``: no state is kept. The stored qualification value is a
  calendar date, so a customer counts as recent for the rest of the UTC day
  they qualified on, plus ``window`` past the following midnight.
"""

from datetime import datetime, timedelta
from typing import Optional

from models.customer import QualificationRecord
from utils.cache_service import TTLCache
from utils.logging_config import get_logger

logger = get_logger(__name__)


class RecencyTracker:
    """Remembers which customers qualified within ``window``."""

    def __init__(self, window: timedelta = timedelta(minutes=10), mode: str = "tracked"):
        self.window = window
        self.mode = mode
        self._marks = TTLCache(max_size=10_000, ttl_seconds=window.total_seconds())

    def mark_qualified(self, customer_id: int, now: datetime) -> None:
        if self.mode != "tracked":
            return
        self._marks.set(str(customer_id), now, now=now.timestamp())
        logger.info("Popup enabled", extra={"customer_id": customer_id})

    def consume_if_recent(
        self,
        customer_id: int,
        now: datetime,
        record: Optional[QualificationRecord] = None,
    ) -> bool:
        """
        True once for a freshly qualified customer.

        In ``record`` mode ``record`` is judged instead and nothing is consumed.
        """
        if self.mode == "record":
            return self._record_is_recent(record, now)

        return self._marks.pop(str(customer_id), now=now.timestamp()) is not None

    def _record_is_recent(self, record: Optional[QualificationRecord], now: datetime) -> bool:
        try:
            qualified_at = record.qualified_at() if record else None
        except ValueError:
            return False
        if qualified_at is None:
            return False
        # Date-only value: the whole qualifying day counts, plus the window.
        return timedelta(0) <= now - qualified_at < timedelta(days=1) + self.window

    def evict_expired(self, now: datetime) -> int:
        """Drop marks older than the window, consumed or not."""
        evicted = self._marks.purge_expired(now.timestamp())
        for customer_id in evicted:
            logger.info("Cleaned up popup flag", extra={"customer_id": customer_id})
        return len(evicted)

    def __len__(self) -> int:
        return len(self._marks)
