"""
Custom exception hierarchy for the Fauna client.

All exceptions inherit from FaunaError, which provides optional context
for structured error handling and logging.
"""

from __future__ import annotations

from typing import Any


class FaunaError(Exception):
    """Base exception for all Fauna client errors.

    Attributes:
        message: Human-readable error message.
        context: Optional structured context for logging/debugging.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class ConfigurationError(FaunaError):
    """Raised when client configuration is invalid or missing."""

    pass


class NoContextError(FaunaError):
    """Raised when an operation runs outside any client context."""

    pass


class InvalidTransaction(FaunaError):
    """Raised when a transaction is submitted without actions.

    Raised before any request is sent.
    """

    pass


class TransactionBadRequest(FaunaError):
    """Raised when the service rejects a compiled transaction.

    Wraps the transport's BadRequest, keeping its message and context.
    """

    pass


class TransportError(FaunaError):
    """Raised when a request to the service fails.

    Context should include:
        - method: The HTTP method
        - ref: The reference that was requested
        - status_code: HTTP status code if applicable
    """

    pass


class BadRequest(TransportError):
    """The service rejected the request as malformed (HTTP 400)."""

    pass


class Unauthorized(TransportError):
    """The secret was missing or not accepted (HTTP 401)."""

    pass


class PermissionDenied(TransportError):
    """The secret may not perform this operation (HTTP 403)."""

    pass


class NotFound(TransportError):
    """No resource exists at the requested reference (HTTP 404)."""

    pass


class Invalid(TransportError):
    """The submitted data failed validation (HTTP 422)."""

    pass


class ServerError(TransportError):
    """The service failed to handle the request (HTTP 5xx)."""

    pass
