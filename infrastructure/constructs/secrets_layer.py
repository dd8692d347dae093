"""
Secrets construct: store API token and webhook signing secret.
"""

from aws_cdk import (
    RemovalPolicy,
    aws_secretsmanager as secretsmanager,
)
from constructs import Construct


class SecretsLayerConstruct(Construct):
    """Provision the credentials the Lambdas read at cold start."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        environment: str,
    ) -> None:
        super().__init__(scope, construct_id)

        removal = RemovalPolicy.RETAIN if environment == "prod" else RemovalPolicy.DESTROY

        # API token is pasted in after the first deploy.
        self.api_token_secret = secretsmanager.Secret(
            self,
            "StoreApiToken",
            description="BigCommerce API token (X-Auth-Token)",
            removal_policy=removal,
        )

        # Random signing secret shared with the webhook sender.
        self.webhook_secret = secretsmanager.Secret(
            self,
            "WebhookSecret",
            description="Shared webhook secret (X-Webhook-Signature HMAC key or X-Webhook-Token value)",
            generate_secret_string=secretsmanager.SecretStringGenerator(
                exclude_punctuation=True,
                password_length=48,
            ),
            removal_policy=removal,
        )
