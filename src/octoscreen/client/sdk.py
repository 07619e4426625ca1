"""OctoPrint REST API Client.

This module provides the HTTP side of the client: authentication injection, error mapping,
connection pooling and retries. The typed command layer sits on top of `OctoPrintClient.do_request`.

How to use the most important parts:
- `OctoPrintClient`: The core class. Instantiate it (optionally with `ApiKeyCredentials`) to begin
  controlling a printer.
- `OctoPrintClient.tools`: The `ToolService` with one method per tool operation.
"""

import collections.abc
import typing

import requests
import structlog
from requests.adapters import HTTPAdapter
from urllib3.util import Retry

from octoscreen.client import auth, consts, exceptions
from octoscreen.client.__version__ import __version__
from octoscreen.client.services.tools import ToolService

__all__ = ["AuthStrategy", "OctoPrintClient"]

logger = structlog.get_logger()


class AuthStrategy(typing.Protocol):
    """Protocol defining how authentication credentials behave."""

    def before_request(self, headers: collections.abc.MutableMapping[str, str | bytes]) -> None:
        """Inject credentials into the request headers.

        This method is called immediately before every request.

        Args:
            headers: The dictionary of headers to modify in-place.
        """
        ...


class OctoPrintClient:
    """Client for the OctoPrint API.

    This client handles the lower-level details of making HTTP requests,
    including authentication injection, error handling, and retries.
    Only GET requests are retried; a POSTed command is never replayed. Once retries run
    out, the last 5xx answer is raised as `OctoPrintApiError`.

    Usage Example:
    ```python
        >>> from octoscreen.client import ApiKeyCredentials, OctoPrintClient
        >>> client = OctoPrintClient(credentials=ApiKeyCredentials(api_key="..."), base_url="http://octopi.local")
        >>> state = client.tools.state()
    ```
    """

    def __init__(
        self,
        credentials: AuthStrategy | None = None,
        base_url: str = consts.DEFAULT_BASE_URL,
        timeout: float = consts.DEFAULT_TIMEOUT,
    ) -> None:
        """Initializes the client.

        Args:
            credentials: An object adhering to the `AuthStrategy` protocol.
                         If None, attempts to load the API key from the environment.
            base_url: Optional override for the server URL.
            timeout: Default timeout for API requests in seconds.
        """
        self._base_url = base_url.rstrip("/")

        if credentials is None:
            credentials = auth.ApiKeyCredentials.load_default()

        if credentials is None:
            raise exceptions.OctoPrintAuthError(
                f"No credentials provided and {consts.API_KEY_ENV} is not set. "
                "Provide an API key explicitly or export it in the environment."
            )

        self._credentials = credentials
        self._timeout = timeout
        self._session = requests.Session()

        # Configure Retries
        retries = Retry(
            total=3,
            backoff_factor=0.5,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods={"GET"},
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retries)
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)

        self._session.headers.update(
            {
                "User-Agent": f"octoscreen-client/{__version__}",
                "Accept": "application/json",
            }
        )

        self.tools = ToolService(self)

    @property
    def base_url(self) -> str:
        """The server URL requests are made against."""
        return self._base_url

    def do_request(self, method: str, uri: str, body: bytes | None = None) -> bytes:
        """Perform one HTTP round trip and return the raw response body.

        Args:
            method: HTTP method (GET, POST).
            uri: Path and query relative to the server URL (e.g. '/api/printer/tool?history=false&limit=0').
            body: Optional JSON request body.

        Returns:
            The raw response body (empty for 204 No Content).

        Raises:
            exceptions.OctoPrintAuthError: On 401/403.
            exceptions.OctoPrintNetworkError: On connection/timeout issues.
            exceptions.OctoPrintApiError: On other non-2xx statuses.
        """
        # The client doesn't know what the credentials put in the headers.
        self._credentials.before_request(self._session.headers)

        url = f"{self._base_url}/{uri.lstrip('/')}"
        headers = {"Content-Type": "application/json"} if body is not None else None

        try:
            logger.debug("API Request", method=method, url=url, body_len=len(body) if body else 0)
            response = self._session.request(method, url, data=body, headers=headers, timeout=self._timeout)
            logger.debug(
                "API Response",
                status_code=response.status_code,
                headers=dict(response.headers),
                body_len=len(response.content),
            )

            if response.status_code in (401, 403):
                raise exceptions.OctoPrintAuthError("Invalid API key or insufficient permissions.")

            if response.status_code >= 400:
                raise exceptions.OctoPrintApiError(
                    message=f"Request failed: {response.reason}",
                    status_code=response.status_code,
                    response_body=response.text[:500],
                )

            return response.content

        except requests.exceptions.RequestException as e:
            logger.error("Network error", error=str(e))
            raise exceptions.OctoPrintNetworkError(f"Failed to connect to OctoPrint: {e}") from e

    def api_request(self, method: str, uri: str, body: bytes | None = None) -> bytes:
        """Public wrapper for making raw authenticated requests.

        This method allows access to endpoints that are not covered by a service.

        Usage Example:
        ```python
            >>> raw = client.api_request("GET", "/api/version")
        ```
        """
        return self.do_request(method, uri, body)
