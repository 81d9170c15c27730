"""
Connector errors — structured conditions raised by the connector itself.

Errors reported by the document store (azure.cosmos.exceptions.*) are never
wrapped; they propagate to the caller unchanged. Everything here is a
condition the connector detects on its own and carries a stable ``code``
the calling framework can branch on.
"""

from __future__ import annotations


class ConnectorError(Exception):
    """Base class for conditions raised by the connector."""

    code = "CONNECTOR_ERROR"
    status_code = 500

    def __init__(self, message: str, *, code: str | None = None):
        self.message = message
        if code is not None:
            self.code = code
        super().__init__(message)

    @property
    def status(self) -> int:
        return self.status_code

    def to_dict(self) -> dict:
        return {
            "name": type(self).__name__,
            "code": self.code,
            "message": self.message,
            "status": self.status_code,
            "statusCode": self.status_code,
        }


class NotFoundError(ConnectorError):
    """Lookup succeeded but returned zero results."""

    code = "NOT_FOUND"
    status_code = 404


class NotImplementedVerbError(ConnectorError):
    """Verb deliberately not supported by this connector."""

    code = "NOT_IMPLEMENTED"
    status_code = 501


class NotConnectedError(ConnectorError):
    """A verb was called before connect() resolved the collection."""

    code = "NOT_CONNECTED"
    status_code = 503


class UnsupportedFilterError(ConnectorError, ValueError):
    """Filter uses something other than plain equality on identifiers."""

    code = "UNSUPPORTED_FILTER"
    status_code = 400


class ConfigValidationError(Exception):
    """Raised when connector settings fail validation."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Config validation failed: {'; '.join(errors)}")
