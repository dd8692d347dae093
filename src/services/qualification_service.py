"""
Qualification rules.

Pure decision logic: given an order, the customer's current VIP membership
and their qualification record, decide what must change. No I/O happens
here; the reconciler carries decisions out.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from models.customer import QualificationRecord
from models.order import Order
from models.qualification import Action, Decision


@dataclass(frozen=True)
class QualificationRules:
    """Programme constants the evaluator needs."""

    min_quantity: int = 2000
    discount_days: int = 90
    policy: str = "windowed"

    @classmethod
    def from_config(cls, config) -> "QualificationRules":
        return cls(
            min_quantity=config.min_quantity,
            discount_days=config.discount_days,
            policy=config.vip_policy,
        )


def is_expired(record: Optional[QualificationRecord], now: datetime, discount_days: int) -> bool:
    """A missing, blank or unreadable record counts as expired."""
    days = days_since(record, now)
    return days is None or days > discount_days


def days_since(record: Optional[QualificationRecord], now: datetime) -> Optional[float]:
    if record is None:
        return None
    try:
        return record.days_since(now)
    except ValueError:
        return None


def days_left(record: Optional[QualificationRecord], now: datetime, discount_days: int) -> float:
    days = days_since(record, now)
    if days is None:
        return 0.0
    return max(0.0, discount_days - days)


def evaluate(
    order: Order,
    is_vip: bool,
    record: Optional[QualificationRecord],
    now: datetime,
    rules: QualificationRules,
) -> Decision:
    """Decide the next qualification state for the order's customer."""
    if order.is_guest:
        return Decision(Action.IGNORE, "guest order")

    if is_vip:
        days = days_since(record, now)
        if is_expired(record, now, rules.discount_days):
            reason = "no qualification date" if days is None else "discount window elapsed"
            return Decision(Action.DEMOTE, reason, days_since=days)
        if rules.policy == "single_use":
            return Decision(Action.DEMOTE, "discount used", days_since=days)
        return Decision(Action.NO_ACTION, "vip active", days_since=days)

    total = order.total_quantity
    if total == 0 or total < rules.min_quantity:
        return Decision(Action.NO_ACTION, "below minimum quantity", total_quantity=total)

    return Decision(
        Action.REQUALIFY,
        "minimum quantity reached",
        total_quantity=total,
        qualified_date=now.astimezone(timezone.utc).date(),
    )
