"""Exceptions for the OctoScreen client library.

How to use the most important parts:
- `OctoPrintError`: Catch this base exception to handle all client-related errors.
- `OctoPrintNetworkError`, `OctoPrintAuthError`, `OctoPrintApiError`: Raised by the transport.
  They reach the caller unchanged, so "server unreachable" can be told apart from anything else.
- `OctoPrintPayloadError`: The server answered, but the body could not be turned into a typed response.
"""


class OctoPrintError(Exception):
    """Base exception for all OctoScreen client errors."""


class OctoPrintAuthError(OctoPrintError):
    """Raised when the API key is missing or rejected (401/403)."""


class OctoPrintNetworkError(OctoPrintError):
    """Raised when the server is unreachable (timeouts, DNS issues)."""


class OctoPrintApiError(OctoPrintError):
    """Raised when the server returns a 4xx or 5xx error."""

    def __init__(self, message: str, status_code: int, response_body: str) -> None:
        """Initialize the error.

        Args:
            message: Error description.
            status_code: HTTP status code.
            response_body: Raw response body from the server.
        """
        super().__init__(f"[{status_code}] {message}")
        self.status_code = status_code
        self.response_body = response_body


class OctoPrintEncodingError(OctoPrintError):
    """Raised when a command payload cannot be serialized. Nothing is sent."""


class OctoPrintPayloadError(OctoPrintError):
    """Raised when a response body is not the JSON shape the client expects."""

    def __init__(self, message: str, payload: bytes | str | None = None) -> None:
        """Initialize the error with the offending payload (truncated)."""
        super().__init__(message)
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8", errors="replace")
        self.payload = payload[:500] if payload is not None else None
