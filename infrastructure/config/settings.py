"""
Environment-specific deployment settings.

Cost-optimized defaults for development/testing.
"""

from dataclasses import dataclass
import os


@dataclass
class Settings:
    """Deployment settings with cost-optimized defaults."""

    # Environment
    environment: str = "dev"
    aws_region: str = "eu-west-2"  # Default AWS region

    # Store programme (passed to the Lambdas as environment variables)
    store_hash: str = ""
    date_attribute_id: str = ""
    vip_group_id: str = "2"
    min_quantity: str = "2000"
    discount_percent: str = "35"
    discount_days: str = "90"
    vip_policy: str = "windowed"

    # Lambda Configuration
    lambda_memory_mb: int = 256
    lambda_timeout_seconds: int = 30
    sweep_timeout_seconds: int = 300

    # Expiry sweep cadence
    sweep_interval_hours: int = 24

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables."""
        env = os.environ.get("ENVIRONMENT", "dev")
        common = dict(
            environment=env,
            aws_region=os.environ.get("AWS_REGION", cls.aws_region),
            store_hash=os.environ.get("BC_STORE_HASH", ""),
            date_attribute_id=os.environ.get("DATE_ATTRIBUTE_ID", ""),
            vip_group_id=os.environ.get("VIP_GROUP_ID", cls.vip_group_id),
            min_quantity=os.environ.get("MIN_QUANTITY", cls.min_quantity),
            discount_percent=os.environ.get("DISCOUNT_PERCENT", cls.discount_percent),
            discount_days=os.environ.get("DISCOUNT_DAYS", cls.discount_days),
            vip_policy=os.environ.get("VIP_POLICY", cls.vip_policy),
        )

        # Production overrides
        if env == "prod":
            return cls(**common, lambda_memory_mb=512, lambda_timeout_seconds=60)

        return cls(**common)

    def lambda_environment(self) -> dict:
        """Programme variables shared by the API and sweep Lambdas."""
        return {
            "ENVIRONMENT": self.environment,
            "BC_STORE_HASH": self.store_hash,
            "DATE_ATTRIBUTE_ID": self.date_attribute_id,
            "VIP_GROUP_ID": self.vip_group_id,
            "MIN_QUANTITY": self.min_quantity,
            "DISCOUNT_PERCENT": self.discount_percent,
            "DISCOUNT_DAYS": self.discount_days,
            "VIP_POLICY": self.vip_policy,
        }
