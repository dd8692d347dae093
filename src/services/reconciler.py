"""
State reconciler.

Carries out qualification decisions against the customer directory. The
directory offers no transactions, so requalification is a short saga:

1. write the qualification date
2. move the customer into the VIP group
3. after a short delay, re-read the date to confirm it stuck

A failed step is logged and left as is. The next expiry sweep or the
customer's next order re-evaluates and repairs the state.
"""

from __future__ import annotations

import time
from datetime import date, timedelta
from typing import Callable, Optional

from models.qualification import Action, Decision, ReconcileResult
from utils.error_handling import DirectoryError
from utils.logging_config import get_logger

logger = get_logger(__name__)

NO_GROUP_ID = 0


class StateReconciler:
    """Applies decisions to the directory; write failures never raise."""

    def __init__(
        self,
        directory,
        vip_group_id: int,
        discount_days: int = 90,
        verify_delay_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.directory = directory
        self.vip_group_id = vip_group_id
        self.discount_days = discount_days
        self.verify_delay_seconds = verify_delay_seconds
        self._sleep = sleep

    def apply(self, customer_id: int, decision: Decision) -> ReconcileResult:
        if decision.action == Action.REQUALIFY:
            return self.requalify(customer_id, decision.qualified_date)
        if decision.action == Action.DEMOTE:
            return self.demote(customer_id)
        return ReconcileResult()

    # ---------------------------------------------------------
    # Requalify
    # ---------------------------------------------------------
    def requalify(self, customer_id: int, qualified_on: date) -> ReconcileResult:
        expires_on = qualified_on + timedelta(days=self.discount_days)
        logger.info(
            "Qualifying customer",
            extra={
                "customer_id": customer_id,
                "start": qualified_on.isoformat(),
                "end": expires_on.isoformat(),
            },
        )

        result = ReconcileResult(
            date_written=self.set_qualified_date(customer_id, qualified_on),
            group_written=self.set_group(customer_id, self.vip_group_id),
        )
        if not result.complete:
            logger.warning(
                "Qualification partially applied",
                extra={
                    "customer_id": customer_id,
                    "date_written": result.date_written,
                    "group_written": result.group_written,
                },
            )
            return result

        if self.verify_delay_seconds > 0:
            self._sleep(self.verify_delay_seconds)
        result.verified = self.verify_qualified(customer_id)
        if result.verified:
            logger.info("Qualification confirmed", extra={"customer_id": customer_id})
        else:
            logger.warning("Could not verify qualification", extra={"customer_id": customer_id})
        return result

    def verify_qualified(self, customer_id: int) -> bool:
        try:
            record = self.directory.fetch_qualification_attribute(customer_id)
        except DirectoryError as exc:
            logger.error(
                "Verification read failed",
                extra={"customer_id": customer_id, "error": str(exc)},
            )
            return False
        return bool(record and record.has_value)

    # ---------------------------------------------------------
    # Demote
    # ---------------------------------------------------------
    def demote(self, customer_id: int, record_id: Optional[int] = None) -> ReconcileResult:
        """
        Remove VIP membership and the qualification record.

        Without ``record_id`` the record is looked up first; a customer with
        no record is already clean.
        """
        group_written = self.set_group(customer_id, NO_GROUP_ID)
        if record_id is None:
            date_written = self.delete_qualified_date(customer_id)
        else:
            date_written = self.delete_record(customer_id, record_id)
        return ReconcileResult(date_written=date_written, group_written=group_written)

    # ---------------------------------------------------------
    # Primitives
    # ---------------------------------------------------------
    def set_qualified_date(self, customer_id: int, qualified_on: date) -> bool:
        try:
            self.directory.upsert_qualification_attribute(customer_id, qualified_on)
            return True
        except DirectoryError as exc:
            logger.error(
                "Error setting qualification date",
                extra={"customer_id": customer_id, "status": exc.upstream_status, "error": str(exc)},
            )
            return False

    def set_group(self, customer_id: int, group_id: int) -> bool:
        try:
            self.directory.set_customer_group(customer_id, group_id)
        except DirectoryError as exc:
            logger.error(
                "Error changing customer group",
                extra={
                    "customer_id": customer_id,
                    "group_id": group_id,
                    "status": exc.upstream_status,
                    "error": str(exc),
                },
            )
            return False
        if group_id == NO_GROUP_ID:
            logger.info("Removed from VIP group", extra={"customer_id": customer_id})
        else:
            logger.info("Added to VIP group", extra={"customer_id": customer_id, "group_id": group_id})
        return True

    def delete_qualified_date(self, customer_id: int) -> bool:
        try:
            record = self.directory.fetch_qualification_attribute(customer_id)
        except DirectoryError as exc:
            logger.error(
                "Error reading qualification date",
                extra={"customer_id": customer_id, "error": str(exc)},
            )
            return False
        if record is None:
            logger.info("No qualification date to delete", extra={"customer_id": customer_id})
            return True
        return self.delete_record(customer_id, record.id)

    def delete_record(self, customer_id: int, record_id: int) -> bool:
        try:
            self.directory.delete_qualification_attribute(record_id)
        except DirectoryError as exc:
            logger.error(
                "Error deleting qualification date",
                extra={"customer_id": customer_id, "record_id": record_id, "error": str(exc)},
            )
            return False
        logger.info("Deleted qualification date", extra={"customer_id": customer_id, "record_id": record_id})
        return True
