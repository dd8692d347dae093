"""Qualification decisions and reconciliation outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


class Action(str, Enum):
    """What the reconciler must do for one customer."""

    IGNORE = "ignore"
    REQUALIFY = "requalify"
    DEMOTE = "demote"
    NO_ACTION = "no_action"


@dataclass(frozen=True)
class Decision:
    """Evaluator output; ``qualified_date`` is set only for REQUALIFY."""

    action: Action
    reason: str
    total_quantity: Optional[int] = None
    days_since: Optional[float] = None
    qualified_date: Optional[date] = None

    @property
    def writes(self) -> bool:
        return self.action in (Action.REQUALIFY, Action.DEMOTE)


@dataclass
class ReconcileResult:
    """
    Outcome of applying a decision.

    For DEMOTE, ``date_written`` means the qualification record is gone and
    ``group_written`` means the VIP group was removed.
    """

    date_written: bool = False
    group_written: bool = False
    verified: bool = False

    @property
    def complete(self) -> bool:
        return self.date_written and self.group_written


@dataclass
class SweepResult:
    """Counters from one expiry sweep."""

    scanned: int = 0
    demoted: int = 0
    failed: int = 0
