# tests/unit/test_exceptions.py

import pytest

from user_creation_logger.exceptions import (
    ConfigurationError,
    InvocationFailedError,
    MissingDetailError,
    MissingEmailError,
    MissingFieldError,
    MissingRequestParametersError,
    MissingTagsError,
    SecretFetchFailedError,
    SecretParseFailedError,
    SecretUnavailableError,
    SinkWriteFailedError,
    UserCreationLoggerError,
    get_error_context,
)


class TestUserCreationLoggerError:
    """Test the base UserCreationLoggerError class."""

    def test_basic_initialization(self):
        """Test basic error initialization."""
        error = UserCreationLoggerError("Test message")
        assert str(error) == "Test message"
        assert error.message == "Test message"
        assert error.error_code == "UserCreationLoggerError"
        assert error.context == {}
        assert error.correlation_id is None

    def test_context_is_copied(self):
        """The caller's dict must not be mutated through the error."""
        context = {"key": "value"}
        error = UserCreationLoggerError("msg", context=context)
        error.context["other"] = 1
        assert context == {"key": "value"}

    def test_to_dict(self):
        """Test conversion to dictionary."""
        error = UserCreationLoggerError(
            "Test message",
            error_code="TEST_CODE",
            context={"key": "value"},
            correlation_id="test-123",
        )
        assert error.to_dict() == {
            "error_type": "UserCreationLoggerError",
            "error_code": "TEST_CODE",
            "message": "Test message",
            "context": {"key": "value"},
            "correlation_id": "test-123",
        }


class TestMissingFieldErrors:
    @pytest.mark.parametrize(
        "error_cls, path",
        [
            (MissingDetailError, "detail"),
            (MissingRequestParametersError, "detail.requestParameters"),
            (MissingTagsError, "detail.requestParameters.tags"),
            (MissingEmailError, "detail.requestParameters.tags.email"),
        ],
    )
    def test_default_message_names_the_path(self, error_cls, path):
        error = error_cls()
        assert isinstance(error, MissingFieldError)
        assert error.message == f"Event field is missing: {path}"
        assert error.error_code == "MISSING_FIELD"
        assert error.context == {"field_path": path}

    def test_extra_context_is_merged(self):
        error = MissingTagsError(context={"validation_errors": ["missing"]})
        assert error.context == {
            "field_path": "detail.requestParameters.tags",
            "validation_errors": ["missing"],
        }


class TestSecretErrors:
    def test_fetch_failed(self):
        error = SecretFetchFailedError(
            "OneTimePassword", "not found", context={"aws_error_code": "X"}
        )
        assert isinstance(error, SecretUnavailableError)
        assert error.message == "Failed to fetch secret 'OneTimePassword': not found"
        assert error.error_code == "SECRET_FETCH_FAILED"
        assert error.context == {"secret_id": "OneTimePassword", "aws_error_code": "X"}

    def test_parse_failed(self):
        error = SecretParseFailedError("OneTimePassword", "password: missing")
        assert isinstance(error, SecretUnavailableError)
        assert error.error_code == "SECRET_PARSE_FAILED"

    def test_parse_failed_merges_context(self):
        error = SecretParseFailedError(
            "OneTimePassword", "password: missing", context={"attempt": 1}
        )
        assert error.message == (
            "Failed to parse secret 'OneTimePassword': password: missing"
        )
        assert error.context == {"secret_id": "OneTimePassword", "attempt": 1}


class TestOtherErrors:
    def test_sink_write_failed(self):
        error = SinkWriteFailedError("log-stream", "boom", context={"log_group": "g"})
        assert error.message == "Failed to write to log-stream: boom"
        assert error.context == {"sink": "log-stream", "log_group": "g"}

    def test_configuration_error(self):
        error = ConfigurationError("bad")
        assert error.error_code == "CONFIGURATION_ERROR"

    def test_invocation_failed(self):
        error = InvocationFailedError("kaboom", context={"error_type": "RuntimeError"})
        assert error.message == "Error processing request: kaboom"
        assert error.error_code == "INVOCATION_FAILED"
        assert error.context == {"error_type": "RuntimeError"}


class TestGetErrorContext:
    def test_service_error(self):
        assert get_error_context(MissingEmailError())["error_type"] == "MissingEmailError"

    def test_foreign_error(self):
        assert get_error_context(ValueError("boom")) == {
            "error_type": "ValueError",
            "message": "boom",
        }
