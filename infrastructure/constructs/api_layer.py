"""
API layer construct: shared Lambda + HTTP API routes.

A single Lambda keeps the webhook dedup set and popup marks in one warm
environment. Uses Docker bundling for dependencies (runs in CI/CD pipeline).
"""

from aws_cdk import (
    BundlingOptions,
    Duration,
    aws_lambda as _lambda,
    aws_apigatewayv2 as apigw,
    aws_apigatewayv2_integrations as integrations,
    aws_logs as logs,
)
from constructs import Construct


def bundled_source() -> _lambda.Code:
    """Lambda code from src/ with requirements-lambda.txt installed alongside."""
    return _lambda.Code.from_asset(
        "src",
        bundling=BundlingOptions(
            image=_lambda.Runtime.PYTHON_3_12.bundling_image,
            command=[
                "bash", "-c",
                "pip install -r requirements-lambda.txt -t /asset-output && "
                "cp -r . /asset-output"
            ],
        ),
    )


class ApiLayerConstruct(Construct):
    """Expose the webhook and storefront endpoints via HTTP API."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        environment: str,
        code: _lambda.Code,
        lambda_environment: dict,
        lambda_memory_mb: int = 256,
        lambda_timeout_seconds: int = 30,
    ) -> None:
        super().__init__(scope, construct_id)

        # Reserved concurrency of one keeps every request in the same
        # environment, so dedup and popup state are shared.
        self.main_lambda = _lambda.Function(
            self,
            "ApiHandler",
            runtime=_lambda.Runtime.PYTHON_3_12,
            handler="handlers.main.lambda_handler",
            code=code,
            memory_size=lambda_memory_mb,
            timeout=Duration.seconds(lambda_timeout_seconds),
            architecture=_lambda.Architecture.X86_64,
            reserved_concurrent_executions=1,
            environment=lambda_environment,
            log_retention=logs.RetentionDays.ONE_WEEK,
        )

        # HTTP API; the storefront popup calls it cross-origin.
        self.api = apigw.HttpApi(
            self,
            "HttpApi",
            api_name=f"vip-discount-api-{environment}",
            cors_preflight=apigw.CorsPreflightOptions(
                allow_origins=["*"],
                allow_methods=[apigw.CorsHttpMethod.ANY],
                allow_headers=["Content-Type", "ngrok-skip-browser-warning"],
            ),
        )

        integration = integrations.HttpLambdaIntegration(
            "LambdaIntegration", self.main_lambda
        )

        route_defs = [
            (apigw.HttpMethod.GET, "/"),
            (apigw.HttpMethod.GET, "/health"),
            (apigw.HttpMethod.GET, "/api/vip-info"),
            (apigw.HttpMethod.GET, "/api/just-qualified/{customerId}"),
            (apigw.HttpMethod.POST, "/webhook"),
        ]

        for method, path in route_defs:
            self.api.add_routes(
                path=path,
                methods=[method],
                integration=integration,
            )
