"""Base Service for OctoScreen client modules."""

import typing


class Transport(typing.Protocol):
    """The HTTP round trip the command layer depends on.

    Implementations raise their own errors for network failures and non-success statuses;
    those errors are passed through to the caller untouched.
    """

    def do_request(self, method: str, uri: str, body: bytes | None = None) -> bytes:
        """Perform one request and return the raw response body."""
        ...


class BaseService:
    """Base class for domain-specific services."""

    def __init__(self, client: Transport):
        """Initialize the service."""
        self._client = client
