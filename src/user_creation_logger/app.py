"""
The Lambda Adapter for the User Creation Logger service.

This module is the main entry point for the AWS Lambda function. It is
responsible for:
1.  Loading configuration once per execution environment.
2.  Initializing AWS Lambda Powertools (Logger and Metrics).
3.  Invoking the core business logic (`process_user_creation`) with clients
    scoped to the invocation.
4.  Translating the outcome into the status string the runtime receives.
"""

import boto3
from aws_lambda_powertools import Logger, Metrics
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from .config import get_config
from .core import OutcomeKind, process_user_creation
from .exceptions import InvocationFailedError, SinkWriteFailedError

# --- Global & Reusable Components ---
CONFIG = get_config()

logger = Logger(service=CONFIG.service_name, level=CONFIG.log_level)
metrics = Metrics(
    namespace="UserCreationLogger",
    service=CONFIG.service_name,
)

_METRIC_BY_OUTCOME = {
    OutcomeKind.SUCCESS: "UserCredentialsLogged",
    OutcomeKind.MISSING_FIELD: "MissingEmail",
    OutcomeKind.SECRET_UNAVAILABLE: "SecretUnavailable",
    OutcomeKind.SINK_ERROR: "SinkWriteFailures",
    OutcomeKind.UNEXPECTED_ERROR: "UnexpectedErrors",
}


@logger.inject_lambda_context()
@metrics.log_metrics(capture_cold_start_metric=True)
def handler(event: dict, context: LambdaContext) -> str:
    """Main Lambda handler for user-creation events."""
    metrics.add_dimension("environment", CONFIG.environment)
    logger.append_keys(sink_type=CONFIG.sink_type)

    try:
        outcome = process_user_creation(
            event, CONFIG, client_factory=boto3.client, log=logger
        )
    except SinkWriteFailedError:
        metrics.add_metric(name="SinkWriteFailures", unit=MetricUnit.Count, value=1)
        raise
    except InvocationFailedError:
        metrics.add_metric(name="UnexpectedErrors", unit=MetricUnit.Count, value=1)
        raise

    metrics.add_metric(
        name=_METRIC_BY_OUTCOME[outcome.kind], unit=MetricUnit.Count, value=1
    )
    return outcome.message
