"""
Runtime configuration for the qualification service.

Values come from the Lambda environment. Credentials may be given inline or
as Secrets Manager ARNs; ARNs are resolved once when the config is built.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Tuple

from utils.error_handling import ConfigError
from utils.logging_config import get_logger, mask_secret

logger = get_logger(__name__)

ORDER_CREATED = "store/order/created"
CART_CONVERTED = "store/cart/converted"

VIP_POLICIES = ("windowed", "single_use")
RECENCY_MODES = ("tracked", "record")


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw in (None, ""):
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc


def _choice(env: Mapping[str, str], name: str, default: str, allowed: Tuple[str, ...]) -> str:
    value = (env.get(name) or default).strip().lower()
    if value not in allowed:
        raise ConfigError(f"{name} must be one of {', '.join(allowed)}, got {value!r}")
    return value


@dataclass
class AppConfig:
    """Settings consumed by the webhook, popup and sweep handlers."""

    store_hash: str
    api_token: str
    date_attribute_id: int
    environment: str = "dev"
    webhook_secret: Optional[str] = None
    api_base_url: str = "https://api.bigcommerce.com"

    vip_group_id: int = 2
    min_quantity: int = 2000
    discount_percent: int = 35
    discount_days: int = 90

    dedup_window_seconds: float = 60
    recency_window_minutes: float = 10
    recency_mode: str = "tracked"
    vip_policy: str = "windowed"
    verify_delay_seconds: float = 1.0
    http_timeout_seconds: float = 20
    webhook_scopes: Tuple[str, ...] = (ORDER_CREATED, CART_CONVERTED)

    @classmethod
    def from_environment(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        secret_loader: Optional[Callable[[str], Optional[str]]] = None,
    ) -> "AppConfig":
        """Load settings from environment variables."""
        env = os.environ if environ is None else environ

        def _secret(value_name: str, arn_name: str) -> Optional[str]:
            value = env.get(value_name)
            if value:
                return value
            arn = env.get(arn_name)
            if not arn:
                return None
            loader = secret_loader
            if loader is None:
                from repositories.secrets_repo import SecretsRepository

                loader = SecretsRepository().get
            return loader(arn)

        store_hash = env.get("BC_STORE_HASH", "").strip()
        if not store_hash:
            raise ConfigError("BC_STORE_HASH is required")

        api_token = _secret("BC_API_TOKEN", "BC_API_TOKEN_SECRET_ARN")
        if not api_token:
            raise ConfigError("BC_API_TOKEN or BC_API_TOKEN_SECRET_ARN is required")

        if not env.get("DATE_ATTRIBUTE_ID"):
            raise ConfigError("DATE_ATTRIBUTE_ID is required")

        recency_mode = _choice(env, "RECENCY_MODE", "tracked", RECENCY_MODES)
        # Record mode judges a date-only value, so it gets a wider default.
        recency_default = 60 if recency_mode == "record" else 10

        scopes = tuple(
            s.strip()
            for s in (env.get("WEBHOOK_SCOPES") or f"{ORDER_CREATED},{CART_CONVERTED}").split(",")
            if s.strip()
        )

        return cls(
            store_hash=store_hash,
            api_token=api_token,
            date_attribute_id=_int(env, "DATE_ATTRIBUTE_ID", 0),
            environment=env.get("ENVIRONMENT", "dev"),
            webhook_secret=_secret("BC_WEBHOOK_SECRET", "BC_WEBHOOK_SECRET_ARN"),
            api_base_url=(env.get("BC_API_BASE_URL") or cls.api_base_url).rstrip("/"),
            vip_group_id=_int(env, "VIP_GROUP_ID", 2),
            min_quantity=_int(env, "MIN_QUANTITY", 2000),
            discount_percent=_int(env, "DISCOUNT_PERCENT", 35),
            discount_days=_int(env, "DISCOUNT_DAYS", 90),
            dedup_window_seconds=_float(env, "DEDUP_WINDOW_SECONDS", 60),
            recency_window_minutes=_float(env, "RECENCY_WINDOW_MINUTES", recency_default),
            recency_mode=recency_mode,
            vip_policy=_choice(env, "VIP_POLICY", "windowed", VIP_POLICIES),
            verify_delay_seconds=_float(env, "VERIFY_DELAY_SECONDS", 1.0),
            http_timeout_seconds=_float(env, "HTTP_TIMEOUT_SECONDS", 20),
            webhook_scopes=scopes,
        )

    def public_summary(self) -> dict:
        """Configuration echo safe to log or return from /health."""
        return {
            "storeHash": self.store_hash,
            "apiToken": mask_secret(self.api_token),
            "hasWebhookSecret": bool(self.webhook_secret),
            "dateAttributeId": self.date_attribute_id,
            "vipGroupId": self.vip_group_id,
            "minQuantity": self.min_quantity,
            "discountPercent": self.discount_percent,
            "discountDays": self.discount_days,
            "vipPolicy": self.vip_policy,
            "recencyMode": self.recency_mode,
        }

    def log_summary(self) -> None:
        logger.info("Configuration loaded", extra=self.public_summary())
