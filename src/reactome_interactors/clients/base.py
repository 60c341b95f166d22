"""Base HTTP client shared by the importer's remote data sources.

Provides:
- Session management with a custom User-Agent
- GET requests with timeout handling, optionally streamed
- Context manager support to close the session
"""

import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0  # seconds, per request (not per download)
DEFAULT_USER_AGENT = "reactome-interactors-importer/0.1.0"


class HTTPClientBase:
    """Base class for HTTP clients.

    Subclasses should:
    - Set BASE_URL class attribute
    - Add source-specific methods built on :meth:`_get`
    """

    BASE_URL: str = ""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str | None = None,
    ):
        """Initialize the client.

        Args:
            timeout: Request timeout in seconds
            user_agent: Custom User-Agent string (uses default if not provided)
        """
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({"User-Agent": user_agent or DEFAULT_USER_AGENT})

    def _get(self, url: str, params: dict[str, Any] | None = None, stream: bool = False) -> requests.Response:
        """Make a GET request.

        Args:
            url: Full URL to fetch
            params: Query parameters
            stream: Defer downloading the body

        Returns:
            Response object

        Raises:
            requests.RequestException: On network errors or non-2xx status
        """
        logger.debug(f"GET {url} params={params}")
        response = self._session.get(url, params=params, timeout=self.timeout, stream=stream)
        response.raise_for_status()
        return response

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()

    def __enter__(self) -> "HTTPClientBase":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit - close session."""
        self.close()
