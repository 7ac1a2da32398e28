"""
Shared fixtures for unit tests.
"""

from __future__ import annotations

import json
import os
import uuid
from unittest.mock import MagicMock

import pytest

from user_creation_logger.config import AppConfig

_CONFIG_VARS = (
    "CUSTOM_REGION",
    "ENVIRONMENT",
    "SINK_REGION",
    "SINK_TYPE",
    "SECRET_NAME",
    "LOG_GROUP_NAME",
    "LOG_STREAM_NAME",
    "SERVICE_NAME",
    "LOG_LEVEL",
)


@pytest.fixture(scope="session", autouse=True)
def _env_vars():
    """
    Ensures a deterministic environment for every test run.
    Overwrite *only* the variables needed by the handler.
    """
    original = os.environ.copy()
    for name in _CONFIG_VARS:
        os.environ.pop(name, None)
    os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "user-creation-logger-test")
    os.environ.setdefault("POWERTOOLS_LOG_LEVEL", "INFO")
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
    yield
    os.environ.clear()
    os.environ.update(original)


# ---------- Minimal, realistic dummy events ---------- #
@pytest.fixture
def user_created_event() -> dict:
    """A CloudTrail-via-EventBridge event for a tagged resource creation."""
    return {
        "version": "0",
        "id": str(uuid.uuid4()),
        "detail-type": "AWS API Call via CloudTrail",
        "source": "aws.iam",
        "account": "000000000000",
        "region": "us-west-2",
        "detail": {
            "eventSource": "iam.amazonaws.com",
            "eventName": "CreateUser",
            "requestParameters": {
                "userName": "jdoe",
                "tags": {"email": "x@y.com", "team": "platform"},
            },
        },
    }


@pytest.fixture
def secret_response() -> dict:
    return {
        "Name": "OneTimePassword-v5-dev-us-west-2",
        "SecretString": json.dumps({"password": "abc123"}),
    }


@pytest.fixture
def make_config():
    """Builds an AppConfig with test defaults, overridable per test."""

    def _make(**overrides) -> AppConfig:
        values = {
            "region": "us-west-2",
            "environment": "dev",
            "sink_type": "logger",
            "sink_region": "us-west-2",
            "log_group_name": "/aws/lambda/user-creation-logs",
            "log_stream_name": "user-creation-stream",
            "service_name": "user-creation-logger-test",
            "log_level": "INFO",
        }
        values.update(overrides)
        return AppConfig(**values)

    return _make


@pytest.fixture
def mock_client_factory() -> MagicMock:
    """Stands in for boto3.client; hands out one MagicMock per service."""
    clients = {"secretsmanager": MagicMock(), "logs": MagicMock()}
    factory = MagicMock(side_effect=lambda service, **kwargs: clients[service])
    factory.clients = clients
    return factory


@pytest.fixture
def lambda_context():
    """A *very* small stand-in for the LambdaContext object."""
    context = MagicMock()
    context.function_name = "user-creation-logger"
    context.function_version = "$LATEST"
    context.memory_limit_in_mb = 128
    context.aws_request_id = "req-" + uuid.uuid4().hex
    context.invoked_function_arn = (
        "arn:aws:lambda:us-west-2:000000000000:function:user-creation-logger"
    )
    context.get_remaining_time_in_millis.return_value = 30000
    return context
