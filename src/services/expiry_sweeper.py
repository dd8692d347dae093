"""Daily backstop that demotes customers whose discount window has elapsed."""

from __future__ import annotations

from datetime import datetime

from models.qualification import SweepResult
from services.reconciler import StateReconciler
from utils.logging_config import get_logger

logger = get_logger(__name__)


class ExpirySweeper:
    """
    Scan every qualification record and demote the expired ones.

    Customers are handled one at a time. A failure on one customer is counted
    and logged, and the scan moves on. Rerunning the sweep is safe: demoted
    customers no longer hold a record.
    """

    def __init__(self, directory, reconciler: StateReconciler, discount_days: int = 90):
        self.directory = directory
        self.reconciler = reconciler
        self.discount_days = discount_days

    def sweep(self, now: datetime) -> SweepResult:
        logger.info("Running expiry check")
        records = [r for r in self.directory.fetch_all_qualification_attributes() if r.has_value]
        result = SweepResult(scanned=len(records))
        logger.info("Found qualified customers", extra={"count": result.scanned})

        for record in records:
            try:
                days = record.days_since(now)
            except ValueError:
                logger.error(
                    "Unreadable qualification date",
                    extra={"customer_id": record.customer_id, "value": record.value},
                )
                result.failed += 1
                continue

            if days is None or days <= self.discount_days:
                continue

            logger.info(
                "Customer expired",
                extra={"customer_id": record.customer_id, "days_since": round(days)},
            )
            try:
                outcome = self.reconciler.demote(record.customer_id, record_id=record.id)
            except Exception as exc:  # one customer must not stop the sweep
                logger.exception(
                    "Demotion failed",
                    extra={"customer_id": record.customer_id, "error": str(exc)},
                )
                result.failed += 1
                continue
            if outcome.complete:
                result.demoted += 1
            else:
                result.failed += 1

        logger.info(
            "Expiry check finished",
            extra={"scanned": result.scanned, "demoted": result.demoted, "failed": result.failed},
        )
        return result
