"""
Expiry schedule: EventBridge rule -> sweep Lambda, plus a run after deploy.
"""

from aws_cdk import (
    Duration,
    aws_events as events,
    aws_events_targets as targets,
    aws_lambda as _lambda,
    aws_logs as logs,
    triggers,
)
from constructs import Construct


class ExpiryScheduleConstruct(Construct):
    """Run the expiry sweep on a fixed interval and once per deployment."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        code: _lambda.Code,
        lambda_environment: dict,
        interval_hours: int = 24,
        timeout_seconds: int = 300,
    ) -> None:
        super().__init__(scope, construct_id)

        self.sweep_lambda = _lambda.Function(
            self,
            "ExpirySweepHandler",
            runtime=_lambda.Runtime.PYTHON_3_12,
            handler="handlers.expiry_sweep.lambda_handler",
            code=code,
            timeout=Duration.seconds(timeout_seconds),
            memory_size=256,
            architecture=_lambda.Architecture.X86_64,
            environment=lambda_environment,
            log_retention=logs.RetentionDays.ONE_WEEK,
        )

        events.Rule(
            self,
            "DailyExpiryRule",
            schedule=events.Schedule.rate(Duration.hours(interval_hours)),
            targets=[targets.LambdaFunction(self.sweep_lambda)],
        )

        # Equivalent of "sweep once at start": runs after every deployment.
        triggers.Trigger(
            self,
            "SweepAfterDeploy",
            handler=self.sweep_lambda,
            invocation_type=triggers.InvocationType.EVENT,
        )
