# src/user_creation_logger/clients.py

"""
Client wrappers for interacting with AWS services (Secrets Manager and
CloudWatch Logs), plus the log sinks the handler writes to.

These classes provide a clean, abstracted interface over raw boto3 clients,
so the handler only ever sees the service's own exception types.
"""

import logging
import time
from contextlib import closing, contextmanager
from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional, Protocol

import boto3
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from .config import SINK_LOG_STREAM, AppConfig
from .exceptions import SecretFetchFailedError, SinkWriteFailedError
from .schemas import parse_secret_record

if TYPE_CHECKING:
    from mypy_boto3_logs.client import CloudWatchLogsClient as LogsClientType
    from mypy_boto3_secretsmanager.client import (
        SecretsManagerClient as SecretsManagerClientType,
    )

logger = logging.getLogger(__name__)

STRUCTURED_MESSAGE_TEMPLATE = (
    "New User Created: Email: {email}, Temporary Password: {password}"
)
LOG_STREAM_MESSAGE_TEMPLATE = "User Created: {email} | Password: {password}"


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class SecretsClient:
    """
    A wrapper for Secrets Manager operations, focused on the one-time password.
    """

    def __init__(self, secrets_client: "SecretsManagerClientType"):
        """
        Initializes the SecretsClient.

        Args:
            secrets_client: A typed boto3 Secrets Manager client.
        """
        self._client = secrets_client

    def get_secret_string(self, secret_id: str) -> str | None:
        """
        Retrieves the SecretString of *secret_id*.
        Raises SecretFetchFailedError for any service or transport failure.
        """
        try:
            response = self._client.get_secret_value(SecretId=secret_id)
            return response.get("SecretString")
        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            error_message = e.response["Error"]["Message"]
            raise SecretFetchFailedError(
                secret_id,
                error_message,
                context={
                    "aws_error_code": error_code,
                    "aws_error_message": error_message,
                },
            ) from e
        except ReadTimeoutError as e:
            raise SecretFetchFailedError(
                secret_id,
                "read timeout",
                context={"timeout_error": str(e)},
            ) from e
        except EndpointConnectionError as e:
            raise SecretFetchFailedError(
                secret_id,
                "endpoint connection error",
                context={"connection_error": str(e)},
            ) from e

    def get_password(self, secret_id: str) -> str:
        """Fetches *secret_id* and returns its `password` field."""
        secret_string = self.get_secret_string(secret_id)
        record = parse_secret_record(secret_id, secret_string)
        logger.debug("Resolved password from secret", extra={"secret_id": secret_id})
        return record.password

    def close(self) -> None:
        self._client.close()


class LogSink(Protocol):
    """Destination for the user-creation record."""

    name: str

    def write(self, email: str, password: str) -> None: ...

    def close(self) -> None: ...


class StructuredLogSink:
    """Writes the record as a single line through the process logger."""

    name = "structured-logger"

    def __init__(self, log: Any = None):
        self._log = log or logger

    def write(self, email: str, password: str) -> None:
        try:
            self._log.info(
                STRUCTURED_MESSAGE_TEMPLATE.format(email=email, password=password)
            )
        except Exception as e:
            raise SinkWriteFailedError(self.name, str(e)) from e

    def close(self) -> None:
        pass  # Nothing to release.


class LogStreamSink:
    """
    Writes the record to a dedicated CloudWatch Logs group/stream pair.
    Owns the underlying boto3 client and releases it on close().
    """

    name = "log-stream"

    def __init__(
        self,
        logs_client: "LogsClientType",
        log_group_name: str,
        log_stream_name: str,
        clock: Callable[[], int] = _epoch_millis,
    ):
        self._client = logs_client
        self._log_group_name = log_group_name
        self._log_stream_name = log_stream_name
        self._clock = clock

    def write(self, email: str, password: str) -> None:
        destination = {
            "log_group": self._log_group_name,
            "log_stream": self._log_stream_name,
        }
        logger.info("Writing user creation record", extra=destination)
        try:
            self._client.put_log_events(
                logGroupName=self._log_group_name,
                logStreamName=self._log_stream_name,
                logEvents=[
                    {
                        "timestamp": self._clock(),
                        "message": LOG_STREAM_MESSAGE_TEMPLATE.format(
                            email=email, password=password
                        ),
                    }
                ],
            )
        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            error_message = e.response["Error"]["Message"]
            raise SinkWriteFailedError(
                self.name,
                error_message,
                context={
                    **destination,
                    "aws_error_code": error_code,
                    "aws_error_message": error_message,
                },
            ) from e
        except (ReadTimeoutError, EndpointConnectionError) as e:
            raise SinkWriteFailedError(
                self.name,
                str(e),
                context={**destination, "connection_error": str(e)},
            ) from e

    def close(self) -> None:
        self._client.close()


class InvocationClients:
    """
    The clients one invocation needs, each built on first use so a client
    that cannot be constructed fails the step that needed it.
    """

    def __init__(
        self,
        config: AppConfig,
        client_factory: Callable[..., Any] = boto3.client,
        log: Any = None,
    ):
        self._config = config
        self._client_factory = client_factory
        self._log = log
        self._secrets: Optional[SecretsClient] = None
        self._sink: Optional[LogSink] = None

    @property
    def secrets(self) -> SecretsClient:
        if self._secrets is None:
            try:
                boto_client = self._client_factory(
                    "secretsmanager", region_name=self._config.region
                )
            except BotoCoreError as e:
                raise SecretFetchFailedError(
                    self._config.secret_name,
                    f"could not create Secrets Manager client: {e}",
                    context={"region": self._config.region},
                ) from e
            self._secrets = SecretsClient(boto_client)
        return self._secrets

    @property
    def sink(self) -> LogSink:
        if self._sink is None:
            if self._config.sink_type != SINK_LOG_STREAM:
                self._sink = StructuredLogSink(self._log)
                return self._sink
            try:
                boto_client = self._client_factory(
                    "logs", region_name=self._config.sink_region
                )
            except BotoCoreError as e:
                raise SinkWriteFailedError(
                    LogStreamSink.name,
                    f"could not create CloudWatch Logs client: {e}",
                    context={"region": self._config.sink_region},
                ) from e
            self._sink = LogStreamSink(
                boto_client,
                log_group_name=self._config.log_group_name,
                log_stream_name=self._config.log_stream_name,
            )
        return self._sink

    def close(self) -> None:
        """Releases whichever clients were created."""
        try:
            if self._sink is not None:
                self._sink.close()
        finally:
            if self._secrets is not None:
                self._secrets.close()


@contextmanager
def aws_clients(
    config: AppConfig,
    client_factory: Callable[..., Any] = boto3.client,
    log: Any = None,
) -> Iterator[InvocationClients]:
    """
    Scopes the clients of one invocation; whatever was opened is closed on
    every exit path.
    """
    with closing(InvocationClients(config, client_factory, log)) as clients:
        yield clients
