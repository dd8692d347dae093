"""
Order webhook processing.

Runs one order event through the qualification flow: load the order and
its customer, evaluate, reconcile, and flag fresh qualifications for the
storefront popup. Events for the same customer are serialized.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from models.qualification import Action, Decision, ReconcileResult
from models.webhook import WebhookEvent
from services.qualification_service import QualificationRules, evaluate
from services.recency_tracker import RecencyTracker
from services.reconciler import StateReconciler
from utils.key_lock import KeyedLock
from utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ProcessingOutcome:
    """What happened to one webhook event."""

    status: str
    order_id: Optional[int] = None
    customer_id: Optional[int] = None
    decision: Optional[Decision] = None
    result: Optional[ReconcileResult] = None

    def as_dict(self) -> dict:
        body = {"status": self.status}
        if self.order_id is not None:
            body["order_id"] = self.order_id
        if self.customer_id is not None:
            body["customer_id"] = self.customer_id
        if self.decision is not None:
            body["action"] = self.decision.action.value
            body["reason"] = self.decision.reason
        return body


class OrderProcessor:
    """Evaluate and reconcile the customer behind an order event."""

    def __init__(
        self,
        directory,
        reconciler: StateReconciler,
        recency: RecencyTracker,
        rules: QualificationRules,
        vip_group_id: int,
        accepted_scopes: tuple = ("store/order/created",),
        locks: Optional[KeyedLock] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.directory = directory
        self.reconciler = reconciler
        self.recency = recency
        self.rules = rules
        self.vip_group_id = vip_group_id
        self.accepted_scopes = tuple(accepted_scopes)
        self.locks = locks or KeyedLock()
        self._clock = clock

    def process(self, event: WebhookEvent) -> ProcessingOutcome:
        """
        Handle one event.

        Reads that feed the decision raise on failure so the sender retries.
        Writes are soft failures reported in the outcome.
        """
        if event.scope not in self.accepted_scopes:
            logger.info("Ignoring webhook scope", extra={"scope": event.scope})
            return ProcessingOutcome(status="ignored_scope")

        order_id = event.order_id()
        if order_id is None:
            logger.info("Webhook without order id", extra={"scope": event.scope})
            return ProcessingOutcome(status="missing_order_id")

        logger.info("Order created", extra={"order_id": order_id, "scope": event.scope})
        order = self.directory.fetch_order(order_id)
        if order is None:
            logger.info("Order not found", extra={"order_id": order_id})
            return ProcessingOutcome(status="order_not_found", order_id=order_id)

        if order.is_guest:
            logger.info("Guest order - skipping", extra={"order_id": order_id})
            decision = evaluate(order, False, None, self._clock(), self.rules)
            return ProcessingOutcome(status="processed", order_id=order_id, decision=decision)

        with self.locks.hold(order.customer_id):
            return self._process_customer_order(order)

    def _process_customer_order(self, order) -> ProcessingOutcome:
        customer_id = order.customer_id
        customer = self.directory.fetch_customer(customer_id)
        is_vip = bool(customer and customer.is_in_group(self.vip_group_id))
        logger.info("VIP status", extra={"customer_id": customer_id, "is_vip": is_vip})

        record = None
        if is_vip:
            record = self.directory.fetch_qualification_attribute(customer_id)
        else:
            order.line_items = self.directory.fetch_order_line_items(order.id)
            logger.info(
                "Order quantity",
                extra={"order_id": order.id, "total_quantity": order.total_quantity},
            )

        now = self._clock()
        decision = evaluate(order, is_vip, record, now, self.rules)
        logger.info(
            "Qualification decision",
            extra={
                "customer_id": customer_id,
                "order_id": order.id,
                "action": decision.action.value,
                "reason": decision.reason,
                "total_quantity": decision.total_quantity,
                "days_since": decision.days_since,
            },
        )

        result = self.reconciler.apply(customer_id, decision)
        if decision.action == Action.REQUALIFY and result.verified:
            self.recency.mark_qualified(customer_id, now)

        return ProcessingOutcome(
            status="processed",
            order_id=order.id,
            customer_id=customer_id,
            decision=decision,
            result=result,
        )
