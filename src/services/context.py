"""
Process-wide service context.

Created on the first invocation of an execution environment (cold start)
and reused by warm invocations. It owns the volatile state: the webhook
dedup set, the recency marks and the per-customer locks. Nothing here is
persisted; a new environment starts empty.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from services.deduplicator import WebhookDeduplicator
from services.expiry_sweeper import ExpirySweeper
from services.order_processor import OrderProcessor
from services.popup_service import PopupService
from services.qualification_service import QualificationRules
from services.recency_tracker import RecencyTracker
from services.reconciler import StateReconciler
from utils.config import AppConfig
from utils.key_lock import KeyedLock


@dataclass
class ServiceContext:
    config: AppConfig
    directory: object
    deduplicator: WebhookDeduplicator
    recency: RecencyTracker
    reconciler: StateReconciler
    processor: OrderProcessor
    sweeper: ExpirySweeper
    popup: PopupService

    @classmethod
    def build(cls, config: AppConfig, directory=None, sleep=None) -> "ServiceContext":
        if directory is None:
            from repositories.bigcommerce_repo import BigCommerceRepository

            directory = BigCommerceRepository.from_config(config)

        recency = RecencyTracker(
            window=timedelta(minutes=config.recency_window_minutes),
            mode=config.recency_mode,
        )
        reconciler_kwargs = {"sleep": sleep} if sleep is not None else {}
        reconciler = StateReconciler(
            directory,
            vip_group_id=config.vip_group_id,
            discount_days=config.discount_days,
            verify_delay_seconds=config.verify_delay_seconds,
            **reconciler_kwargs,
        )
        return cls(
            config=config,
            directory=directory,
            deduplicator=WebhookDeduplicator(window_seconds=config.dedup_window_seconds),
            recency=recency,
            reconciler=reconciler,
            processor=OrderProcessor(
                directory,
                reconciler,
                recency,
                QualificationRules.from_config(config),
                vip_group_id=config.vip_group_id,
                accepted_scopes=config.webhook_scopes,
                locks=KeyedLock(),
            ),
            sweeper=ExpirySweeper(directory, reconciler, discount_days=config.discount_days),
            popup=PopupService(
                directory,
                recency,
                vip_group_id=config.vip_group_id,
                discount_days=config.discount_days,
                discount_percent=config.discount_percent,
            ),
        )


_context: Optional[ServiceContext] = None


def get_context() -> ServiceContext:
    """Lazy-load the context so import never touches the network."""
    global _context
    if _context is None:
        config = AppConfig.from_environment()
        config.log_summary()
        _context = ServiceContext.build(config)
    return _context


def set_context(context: Optional[ServiceContext]) -> None:
    """Install a prebuilt context, or clear it with None."""
    global _context
    _context = context
