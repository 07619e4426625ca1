"""Authentication for the OctoPrint API.

OctoPrint authenticates REST calls with an API key sent in the ``X-Api-Key`` header.

How to use the most important parts:
- `ApiKeyCredentials`: Pass this to `OctoPrintClient(credentials=...)`.
- `ApiKeyCredentials.load_default()`: Picks the key up from the ``OCTOPRINT_API_KEY`` environment variable.
"""

from __future__ import annotations

import collections.abc  # noqa: TC003
import os

import pydantic
import structlog

from octoscreen.client import consts

logger = structlog.get_logger()


class ApiKeyCredentials(pydantic.BaseModel):
    """Static API key credentials.

    Usage Example:
    ```python
        >>> creds = ApiKeyCredentials(api_key="0123456789ABCDEF")
        >>> client = OctoPrintClient(credentials=creds)
    ```
    """

    api_key: pydantic.SecretStr

    @pydantic.field_validator("api_key")
    @classmethod
    def not_blank(cls, v: pydantic.SecretStr) -> pydantic.SecretStr:
        """Reject empty keys."""
        if not v.get_secret_value().strip():
            raise ValueError("api_key must not be empty")
        return v

    def before_request(self, headers: collections.abc.MutableMapping[str, str | bytes]) -> None:
        """Inject the API key header."""
        headers[consts.API_KEY_HEADER] = self.api_key.get_secret_value()

    @classmethod
    def load_default(cls) -> ApiKeyCredentials | None:
        """Load credentials from the environment.

        Returns:
            Credentials built from ``OCTOPRINT_API_KEY``, or None if it is unset or empty.
        """
        api_key = os.environ.get(consts.API_KEY_ENV, "").strip()
        if not api_key:
            logger.debug("No API key in environment", variable=consts.API_KEY_ENV)
            return None
        logger.debug("Loaded API key from environment", variable=consts.API_KEY_ENV)
        return cls(api_key=api_key)
