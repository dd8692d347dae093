"""Storefront popup check: is this customer VIP, and did they just qualify?"""

from __future__ import annotations

import math
from datetime import datetime

from models.response import JustQualifiedResponse
from services.qualification_service import days_left, is_expired
from services.recency_tracker import RecencyTracker
from utils.error_handling import DirectoryError
from utils.logging_config import get_logger

logger = get_logger(__name__)


class PopupService:
    """Answers GET /api/just-qualified/{customerId}."""

    def __init__(
        self,
        directory,
        recency: RecencyTracker,
        vip_group_id: int,
        discount_days: int = 90,
        discount_percent: int = 35,
    ):
        self.directory = directory
        self.recency = recency
        self.vip_group_id = vip_group_id
        self.discount_days = discount_days
        self.discount_percent = discount_percent

    def check(self, customer_id: int, now: datetime) -> JustQualifiedResponse:
        """Directory failures answer "not VIP" rather than an error."""
        logger.info("Popup check", extra={"customer_id": customer_id})
        try:
            customer = self.directory.fetch_customer(customer_id)
            if not customer or not customer.is_in_group(self.vip_group_id):
                return JustQualifiedResponse()

            record = self.directory.fetch_qualification_attribute(customer_id)
        except DirectoryError as exc:
            logger.error("Popup check failed", extra={"customer_id": customer_id, "error": str(exc)})
            return JustQualifiedResponse()

        if is_expired(record, now, self.discount_days):
            logger.info("No valid qualification or expired", extra={"customer_id": customer_id})
            return JustQualifiedResponse()

        show_popup = self.recency.consume_if_recent(customer_id, now, record)
        remaining = days_left(record, now, self.discount_days)
        logger.info(
            "Popup decision",
            extra={"customer_id": customer_id, "show_popup": show_popup, "days_left": round(remaining)},
        )
        return JustQualifiedResponse(
            just_qualified=show_popup,
            is_vip=True,
            days_left=math.floor(remaining),
            discount_percent=self.discount_percent,
            qualified_date=record.value,
        )
