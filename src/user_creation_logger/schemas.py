# In src/user_creation_logger/schemas.py

import logging
from typing import Any, TypedDict

import pydantic
from pydantic import BaseModel, Field, StrictStr

from .exceptions import (
    MissingDetailError,
    MissingEmailError,
    MissingFieldError,
    MissingRequestParametersError,
    MissingTagsError,
    SecretParseFailedError,
)

logger = logging.getLogger(__name__)

# --- Static Type Hinting (for mypy and IDEs) ---


class UserTagsDict(TypedDict):
    email: str


class RequestParametersDict(TypedDict):
    tags: UserTagsDict


class EventDetailDict(TypedDict):
    requestParameters: RequestParametersDict


class UserCreationEventDict(TypedDict):
    """
    A TypedDict representing the part of a user-creation event this service
    reads. Used for static type analysis throughout the application.
    """

    detail: EventDetailDict


# --- Runtime Validation (using Pydantic) ---


class UserTags(BaseModel):
    email: StrictStr


class RequestParameters(BaseModel):
    tags: UserTags


class EventDetail(BaseModel):
    request_parameters: RequestParameters = Field(..., alias="requestParameters")


class UserCreationEvent(BaseModel):
    """
    Pydantic model for runtime parsing of the user-creation event.
    Only `detail.requestParameters.tags.email` is consumed; everything else
    in the payload is ignored.
    """

    detail: EventDetail

    @property
    def email(self) -> str:
        return self.detail.request_parameters.tags.email


class SecretRecord(BaseModel):
    """The JSON document stored in Secrets Manager."""

    password: StrictStr


# Nesting depth of a validation error location -> the segment that failed.
_MISSING_FIELD_BY_DEPTH: dict[int, type[MissingFieldError]] = {
    0: MissingDetailError,
    1: MissingDetailError,
    2: MissingRequestParametersError,
    3: MissingTagsError,
}


def parse_event(event: Any) -> UserCreationEvent:
    """
    Decodes *event* into a UserCreationEvent.

    Raises the MissingFieldError subclass naming the outermost segment of
    `detail.requestParameters.tags.email` that is absent or has the wrong shape.
    """
    try:
        return UserCreationEvent.model_validate(event)
    except pydantic.ValidationError as e:
        depth = min(len(err["loc"]) for err in e.errors())
        error_cls = _MISSING_FIELD_BY_DEPTH.get(depth, MissingEmailError)
        raise error_cls(
            context={"validation_errors": [err["type"] for err in e.errors()]}
        ) from e


def parse_email(event: Any) -> str:
    """Returns the email tag of *event*, raising a MissingFieldError if absent."""
    return parse_event(event).email


def extract_email(event: Any) -> str | None:
    """
    Returns the email tag of *event*, or None when any segment of the path is
    missing or malformed. Never raises for a bad payload.
    """
    try:
        return parse_email(event)
    except MissingFieldError as e:
        logger.error(
            "Email not found in event",
            extra={"field_path": e.field_path, "error_code": e.error_code},
        )
        return None


def parse_secret_record(secret_id: str, secret_string: str | None) -> SecretRecord:
    """
    Decodes the SecretString of *secret_id* into a SecretRecord.
    Validation messages never include the secret value itself.
    """
    if not secret_string:
        raise SecretParseFailedError(secret_id, "secret has no SecretString value")
    try:
        return SecretRecord.model_validate_json(secret_string)
    except pydantic.ValidationError as e:
        reasons = ", ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['type']}"
            for err in e.errors()
        )
        raise SecretParseFailedError(secret_id, reasons) from e
