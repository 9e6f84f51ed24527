"""
Failure classification and the JSON error envelope.

Every response carries a ``success`` flag. Failures add an ``error``
message, plus a ``details`` traceback when the app runs in debug mode.

Errors raised below the HTTP surface are KnownError subclasses. Each one
carries the status code the exception handlers in ``binderbase.main``
respond with:

- ValidationError: bad or missing input (400)
- NotFoundError: deck, card or provider record absent (404)
- StoreError: persistence failure (500)
- ProviderError: Scryfall or EDHREC unreachable or non-2xx (500)

Nothing is retried. The first failure is surfaced.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    STORE_ERROR = "store_error"
    PROVIDER_ERROR = "provider_error"
    UNKNOWN = "unknown"


class ErrorResponse(BaseModel):
    """Envelope returned for every failed request."""

    success: bool = False
    error: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    details: str | None = Field(
        default=None,
        description="Traceback, only present when debug is enabled",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    kind: FailureKind = FailureKind.UNKNOWN
    status_code: int = 500

    def __init__(self, message: str, detail: str | None = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class ValidationError(KnownError):
    """Raised when request input is missing or malformed."""

    kind = FailureKind.INVALID_INPUT
    status_code = 400


class NotFoundError(KnownError):
    """Raised when a deck, a deck card or a provider record does not exist."""

    kind = FailureKind.NOT_FOUND
    status_code = 404


class StoreError(KnownError):
    """Raised when the record store fails. Wraps the driver exception."""

    kind = FailureKind.STORE_ERROR
    status_code = 500


class ProviderError(KnownError):
    """Raised when a third-party provider is unreachable or answers non-2xx."""

    kind = FailureKind.PROVIDER_ERROR
    status_code = 500
