"""Custom exception hierarchy for contractorcli.

All exceptions inherit from ContractorCLIError so callers can catch broadly
or narrowly as needed.
"""

from __future__ import annotations

from typing import Any, Optional


class ContractorCLIError(Exception):
    """Base exception for all contractorcli errors."""


# ---------------------------------------------------------------------------
# Client side
# ---------------------------------------------------------------------------

class ArgumentError(ContractorCLIError):
    """Bad arguments detected before any request was sent."""


class UnboundResourceError(ArgumentError):
    """Operation needs a server-assigned identity the resource does not have."""

    def __init__(self, kind_name: str, operation: str):
        self.kind_name = kind_name
        self.operation = operation
        super().__init__(f"Cannot {operation} {kind_name}: it has no identity yet, get() or create() it first")


class ConfigError(ContractorCLIError):
    """Invalid or missing configuration."""


# ---------------------------------------------------------------------------
# Server reported
# ---------------------------------------------------------------------------

class NotFoundError(ContractorCLIError):
    """The requested identity does not resolve on the server."""


class ValidationError(ContractorCLIError):
    """Server rejected the submitted field values."""

    def __init__(self, message: str, field_errors: Optional[dict[str, Any]] = None):
        self.field_errors = field_errors or {}
        if self.field_errors:
            details = "; ".join(f"{name}: {value}" for name, value in sorted(self.field_errors.items()))
            message = f"{message} ({details})"
        super().__init__(message)


class ActionError(ContractorCLIError):
    """A remote action call failed on the server."""

    def __init__(self, action: str, message: str):
        self.action = action
        super().__init__(f"Action '{action}' failed: {message}")


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------

class TransportError(ContractorCLIError):
    """Connectivity, authentication or serialization failure."""


class AuthenticationError(TransportError):
    """Invalid credentials or expired session."""


class NotAuthorizedError(TransportError):
    """Authenticated user is not allowed to perform the request."""


class ServerError(TransportError):
    """Server failed while handling the request."""


class ResponseParseError(TransportError):
    """Failed to decode the server response."""
