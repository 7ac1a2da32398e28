# src/user_creation_logger/core.py

"""
Core business logic for logging newly created users.

The handler runs one strictly linear sequence per invocation:

1.  Extract the email from `detail.requestParameters.tags.email`.
2.  Fetch the temporary password from Secrets Manager.
3.  Write one record containing both to the configured log sink.

The first failure short-circuits the remaining steps and is reported as an
`Outcome`; nothing is retried. Only sink failures in the log-stream variant
(and unexpected errors there, wrapped in `InvocationFailedError`) propagate
to the Lambda runtime.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable

import boto3

from .clients import InvocationClients, aws_clients
from .config import AppConfig
from .exceptions import (
    InvocationFailedError,
    SecretUnavailableError,
    SinkWriteFailedError,
    get_error_context,
)
from .schemas import extract_email

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "User credentials logged successfully"
MISSING_EMAIL_MESSAGE = "Email not found in event"
SECRET_UNAVAILABLE_MESSAGE = "Failed to retrieve password"
ERROR_MESSAGE_PREFIX = "Error processing request: "


class OutcomeKind(enum.Enum):
    SUCCESS = "success"
    MISSING_FIELD = "missing_field"
    SECRET_UNAVAILABLE = "secret_unavailable"
    SINK_ERROR = "sink_error"
    UNEXPECTED_ERROR = "unexpected_error"


@dataclass(frozen=True)
class Outcome:
    """Result of one invocation; `message` is what the runtime receives."""

    kind: OutcomeKind
    message: str
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS


class UserCreationHandler:
    """Runs the extract → fetch secret → log sequence for a single event."""

    def __init__(self, config: AppConfig, clients: InvocationClients):
        self._config = config
        self._clients = clients

    def handle(self, event: Any) -> Outcome:
        logger.info("Received event", extra={"event": event})
        try:
            return self._handle(event)
        except SinkWriteFailedError:
            raise
        except Exception as e:
            logger.exception(
                "Error processing request", extra={"error_type": type(e).__name__}
            )
            if self._config.propagate_failures:
                raise InvocationFailedError(
                    str(e), context={"error_type": type(e).__name__}
                ) from e
            return Outcome(
                OutcomeKind.UNEXPECTED_ERROR, ERROR_MESSAGE_PREFIX + str(e), e
            )

    def _handle(self, event: Any) -> Outcome:
        email = extract_email(event)
        if email is None:
            return Outcome(OutcomeKind.MISSING_FIELD, MISSING_EMAIL_MESSAGE)

        secret_name = self._config.secret_name
        try:
            password = self._clients.secrets.get_password(secret_name)
        except SecretUnavailableError as e:
            logger.error(
                "Failed to retrieve password from Secrets Manager",
                extra={"error": get_error_context(e)},
            )
            return Outcome(
                OutcomeKind.SECRET_UNAVAILABLE, SECRET_UNAVAILABLE_MESSAGE, e
            )

        try:
            sink = self._clients.sink
            sink.write(email, password)
        except SinkWriteFailedError as e:
            logger.error(
                "Failed to write user record", extra={"error": get_error_context(e)}
            )
            if self._config.propagate_failures:
                raise
            return Outcome(OutcomeKind.SINK_ERROR, ERROR_MESSAGE_PREFIX + e.message, e)

        logger.debug("User record written", extra={"sink": sink.name})
        return Outcome(OutcomeKind.SUCCESS, SUCCESS_MESSAGE)


def process_user_creation(
    event: Any,
    config: AppConfig,
    client_factory: Callable[..., Any] = boto3.client,
    log: Any = None,
) -> Outcome:
    """
    Handles one event with clients scoped to this invocation. Clients are
    built on first use and released before this function returns or raises.
    """
    with aws_clients(config, client_factory=client_factory, log=log) as clients:
        return UserCreationHandler(config, clients).handle(event)
