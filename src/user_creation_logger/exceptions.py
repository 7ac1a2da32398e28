# src/user_creation_logger/exceptions.py

"""
Shared custom exceptions for the User Creation Logger service.

Centralizing exception definitions in a separate module prevents circular
import errors between other modules that need to raise or catch them.

Exception Hierarchy:
- UserCreationLoggerError (base)
  - ConfigurationError
  - MissingFieldError (event did not carry the email)
    - MissingDetailError
    - MissingRequestParametersError
    - MissingTagsError
    - MissingEmailError
  - SecretUnavailableError (password could not be resolved)
    - SecretFetchFailedError
    - SecretParseFailedError
  - SinkWriteFailedError
  - InvocationFailedError (unexpected error, wrapped for the runtime)
"""

from typing import Any, Dict, Optional


class UserCreationLoggerError(Exception):
    """Base exception for all User Creation Logger service errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        correlation_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = dict(context) if context else {}
        self.correlation_id = correlation_id

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
            "correlation_id": self.correlation_id,
        }


# === Configuration Errors ===


class ConfigurationError(UserCreationLoggerError):
    """Raised when there's an error in the application configuration."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="CONFIGURATION_ERROR", **kwargs)


# === Event Extraction Errors ===


class MissingFieldError(UserCreationLoggerError):
    """Base class for a required segment missing from the inbound event."""

    field_path: str = ""

    def __init__(self, message: Optional[str] = None, **kwargs):
        message = message or f"Event field is missing: {self.field_path}"
        context = {"field_path": self.field_path}
        if "context" in kwargs:
            context.update(kwargs.pop("context"))
        kwargs.setdefault("error_code", "MISSING_FIELD")
        super().__init__(message, context=context, **kwargs)


class MissingDetailError(MissingFieldError):
    """Raised when the event has no usable `detail` object."""

    field_path = "detail"


class MissingRequestParametersError(MissingFieldError):
    """Raised when `detail.requestParameters` is absent or malformed."""

    field_path = "detail.requestParameters"


class MissingTagsError(MissingFieldError):
    """Raised when `detail.requestParameters.tags` is absent or malformed."""

    field_path = "detail.requestParameters.tags"


class MissingEmailError(MissingFieldError):
    """Raised when the `email` tag is absent or not a string."""

    field_path = "detail.requestParameters.tags.email"


# === Secret Errors ===


class SecretUnavailableError(UserCreationLoggerError):
    """Base class for failures resolving the temporary password."""

    pass


class SecretFetchFailedError(SecretUnavailableError):
    """Raised when Secrets Manager could not return the secret."""

    def __init__(self, secret_id: str, reason: str, **kwargs):
        message = f"Failed to fetch secret '{secret_id}': {reason}"
        context = {"secret_id": secret_id}
        if "context" in kwargs:
            context.update(kwargs.pop("context"))
        super().__init__(
            message, error_code="SECRET_FETCH_FAILED", context=context, **kwargs
        )


class SecretParseFailedError(SecretUnavailableError):
    """Raised when the secret value is not a JSON object with a `password`."""

    def __init__(self, secret_id: str, reason: str, **kwargs):
        message = f"Failed to parse secret '{secret_id}': {reason}"
        context = {"secret_id": secret_id}
        if "context" in kwargs:
            context.update(kwargs.pop("context"))
        super().__init__(
            message, error_code="SECRET_PARSE_FAILED", context=context, **kwargs
        )


# === Sink Errors ===


class SinkWriteFailedError(UserCreationLoggerError):
    """Raised when the log record could not be written to the sink."""

    def __init__(self, sink: str, reason: str, **kwargs):
        message = f"Failed to write to {sink}: {reason}"
        context = {"sink": sink}
        if "context" in kwargs:
            context.update(kwargs.pop("context"))
        super().__init__(
            message, error_code="SINK_WRITE_FAILED", context=context, **kwargs
        )


class InvocationFailedError(UserCreationLoggerError):
    """Wraps an unexpected error so the runtime records the invocation as failed."""

    def __init__(self, reason: str, **kwargs):
        message = f"Error processing request: {reason}"
        super().__init__(message, error_code="INVOCATION_FAILED", **kwargs)


# === Utility Functions ===


def get_error_context(error: Exception) -> Dict[str, Any]:
    """Extract error context for logging."""
    if isinstance(error, UserCreationLoggerError):
        return error.to_dict()
    else:
        return {
            "error_type": error.__class__.__name__,
            "message": str(error),
        }
