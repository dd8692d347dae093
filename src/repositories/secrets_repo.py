"""Secrets Manager lookups for store credentials."""

import json
from typing import Optional

import boto3
from botocore.exceptions import ClientError

from utils.logging_config import get_logger

logger = get_logger(__name__)


class SecretsRepository:
    """Read secret strings, optionally picking one key out of a JSON secret."""

    def __init__(self, client=None):
        self.client = client or boto3.client("secretsmanager")

    def get(self, secret_arn: str, key: Optional[str] = None) -> Optional[str]:
        """Return the secret value, or None when it cannot be read."""
        try:
            secret_value = self.client.get_secret_value(SecretId=secret_arn)["SecretString"]
        except (ClientError, KeyError) as exc:
            logger.error(
                "Failed to read secret",
                extra={"secret_arn": secret_arn, "error": str(exc)},
            )
            return None

        if key is None:
            return secret_value
        try:
            parsed = json.loads(secret_value)
        except json.JSONDecodeError:
            return secret_value
        if isinstance(parsed, dict):
            return parsed.get(key) or None
        return secret_value
