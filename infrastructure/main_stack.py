"""
Main CDK Stack for the VIP wholesale discount service.
"""

from aws_cdk import (
    Stack,
    Tags,
    CfnOutput,
)
from constructs import Construct

from infrastructure.constructs.api_layer import ApiLayerConstruct, bundled_source
from infrastructure.constructs.expiry_schedule import ExpiryScheduleConstruct
from infrastructure.constructs.secrets_layer import SecretsLayerConstruct
from infrastructure.config.settings import Settings


class VipDiscountStack(Stack):
    """Main stack wiring all constructs together."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        settings: Settings,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # Global tags for cost/accounting.
        Tags.of(self).add("Project", "vip-wholesale-discount")
        Tags.of(self).add("Environment", settings.environment)
        Tags.of(self).add("ManagedBy", "cdk")

        # 1) Credentials.
        secrets = SecretsLayerConstruct(
            self,
            "Secrets",
            environment=settings.environment,
        )

        lambda_environment = {
            **settings.lambda_environment(),
            "BC_API_TOKEN_SECRET_ARN": secrets.api_token_secret.secret_arn,
            "BC_WEBHOOK_SECRET_ARN": secrets.webhook_secret.secret_arn,
        }
        code = bundled_source()

        # 2) API layer (single Lambda).
        api_construct = ApiLayerConstruct(
            self,
            "ApiLayer",
            environment=settings.environment,
            code=code,
            lambda_environment=lambda_environment,
            lambda_memory_mb=settings.lambda_memory_mb,
            lambda_timeout_seconds=settings.lambda_timeout_seconds,
        )

        # 3) Daily expiry sweep.
        schedule_construct = ExpiryScheduleConstruct(
            self,
            "ExpirySchedule",
            code=code,
            lambda_environment=lambda_environment,
            interval_hours=settings.sweep_interval_hours,
            timeout_seconds=settings.sweep_timeout_seconds,
        )

        # Permissions.
        for fn in (api_construct.main_lambda, schedule_construct.sweep_lambda):
            secrets.api_token_secret.grant_read(fn)
            secrets.webhook_secret.grant_read(fn)

        # Outputs to quickly find resources.
        CfnOutput(self, "ApiEndpoint", value=api_construct.api.api_endpoint)
        CfnOutput(self, "WebhookUrl", value=f"{api_construct.api.api_endpoint}/webhook")
        CfnOutput(self, "ApiTokenSecretArn", value=secrets.api_token_secret.secret_arn)
        CfnOutput(self, "WebhookSecretArn", value=secrets.webhook_secret.secret_arn)
