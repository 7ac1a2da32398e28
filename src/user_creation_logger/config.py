import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SINK_LOGGER = "logger"
SINK_LOG_STREAM = "log-stream"

DEFAULT_REGION = "us-west-2"
DEFAULT_ENVIRONMENT = "dev"
DEFAULT_LOG_GROUP_NAME = "/aws/lambda/user-creation-logs"
DEFAULT_LOG_STREAM_NAME = "user-creation-stream"
DEFAULT_SERVICE_NAME = "user-creation-logger"

VERSIONED_SECRET_NAME_TEMPLATE = "OneTimePassword-v5-{environment}-{region}"
FIXED_SECRET_NAME = "OneTimePassword"


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration loaded from environment variables."""

    # --- Secret Lookup ---
    region: str
    environment: str

    # --- Log Sink ---
    sink_type: str
    sink_region: str
    log_group_name: str
    log_stream_name: str

    # --- Observability ---
    service_name: str
    log_level: str

    # --- Overrides ---
    secret_name_override: str | None = None

    # --- Derived Properties ---
    @property
    def secret_name(self) -> str:
        if self.secret_name_override:
            return self.secret_name_override
        if self.sink_type == SINK_LOG_STREAM:
            return FIXED_SECRET_NAME
        return VERSIONED_SECRET_NAME_TEMPLATE.format(
            environment=self.environment, region=self.region
        )

    @property
    def propagate_failures(self) -> bool:
        return self.sink_type == SINK_LOG_STREAM

    @classmethod
    def load_from_env(cls) -> "AppConfig":
        """
        Loads configuration from environment variables, performing validation.
        Every variable has a default; fails fast with a ConfigurationError if a
        value that is set is invalid.
        """
        try:
            region = _non_empty("CUSTOM_REGION", DEFAULT_REGION)
            environment = _non_empty("ENVIRONMENT", DEFAULT_ENVIRONMENT)
            sink_region = _non_empty("SINK_REGION", region)

            sink_type = os.getenv("SINK_TYPE", SINK_LOGGER).strip().lower()
            allowed_sink_types = [SINK_LOGGER, SINK_LOG_STREAM]
            if sink_type not in allowed_sink_types:
                raise ValueError(
                    f"SINK_TYPE must be one of {allowed_sink_types}, not '{sink_type}'"
                )

            log_group_name = _non_empty("LOG_GROUP_NAME", DEFAULT_LOG_GROUP_NAME)
            log_stream_name = _non_empty("LOG_STREAM_NAME", DEFAULT_LOG_STREAM_NAME)
            service_name = _non_empty("SERVICE_NAME", DEFAULT_SERVICE_NAME)

            log_level = os.getenv("LOG_LEVEL", "INFO").upper()
            allowed_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
            if log_level not in allowed_log_levels:
                raise ValueError(
                    f"LOG_LEVEL must be one of {allowed_log_levels}, not '{log_level}'"
                )

            secret_name_override = os.getenv("SECRET_NAME", "").strip() or None

        except (ValueError, TypeError) as e:
            raise ConfigurationError(
                f"Invalid value for an environment variable: {e}"
            ) from e

        return cls(
            region=region,
            environment=environment,
            sink_type=sink_type,
            sink_region=sink_region,
            log_group_name=log_group_name,
            log_stream_name=log_stream_name,
            service_name=service_name,
            log_level=log_level,
            secret_name_override=secret_name_override,
        )


def _non_empty(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip()
    if not value:
        raise ValueError(f"{name} must not be empty.")
    return value


# --- Singleton Factory Function (Lazy-loaded and Cached) ---
@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """
    Loads the application configuration from environment variables.
    The result is cached using lru_cache, so the environment is only read once
    on the first call. This avoids import-time side effects.
    """
    logger.info("Loading application configuration from environment...")
    return AppConfig.load_from_env()
