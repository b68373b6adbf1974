"""geocaching.com website and API proxy client."""

import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

import requests

from gcweb.api.transport import Params, RequestBody, RequestsTransport, Transport
from gcweb.config import Config
from gcweb.core.constants import DisplayConstants
from gcweb.exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    NotFoundError,
    PermissionError,
    RateLimitError,
    TimeoutError,
)


def truncate(text: str | None, limit: int = DisplayConstants.MAX_DIAGNOSTIC_LENGTH) -> str:
    """Shorten a response body for use in diagnostics."""
    if not text:
        return ""
    return text if len(text) <= limit else f"{text[:limit]}..."


def parse_retry_after(value: str | None) -> int | None:
    """Seconds to wait from a ``Retry-After`` header, given as seconds or an HTTP date."""
    if not value:
        return None
    value = value.strip()
    if value.isdigit():
        return int(value)
    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)
    return max(0, int((retry_at - datetime.now(timezone.utc)).total_seconds()))


class GCWebClient:
    """Client for the geocaching.com website and its API proxy.

    Every response is released before the calling method returns, on success
    and on error alike.
    """

    def __init__(self, transport: Transport | None = None, config: Config | None = None) -> None:
        """Initialize the client.

        Args:
            transport: Authenticated transport to use (defaults to a requests session
                primed from configuration, opened when entering the context)
            config: Application config (falls back to environment/defaults)

        """
        self.logger = logging.getLogger(__name__)
        self.config = config or Config()
        self.website_url = self.config.website_url.rstrip("/")
        self.api_proxy_url = self.config.api_proxy_url.rstrip("/")
        for name, url in (("website_url", self.website_url), ("api_proxy_url", self.api_proxy_url)):
            if not url.startswith(("http://", "https://")):
                raise ConfigurationError(f"Invalid {name}: {url!r}", {"field": name})

        self.transport: Transport | None = transport
        self._owns_transport = transport is None
        self.logger.debug(f"GCWebClient initialized for {self.website_url}")

    def __enter__(self) -> "GCWebClient":
        """Enter context."""
        if self.transport is None:
            self.logger.info("Opening client session")
            self.transport = RequestsTransport(config=self.config)
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context."""
        if self._owns_transport and self.transport is not None:
            self.logger.info("Closing client session")
            self.transport.close()
            self.transport = None

    def website(self, endpoint: str) -> str:
        return f"{self.website_url}{endpoint}"

    def api_proxy(self, endpoint: str) -> str:
        return f"{self.api_proxy_url}{endpoint}"

    def require_transport(self) -> Transport:
        if self.transport is None:
            raise RuntimeError("Client not initialized. Use context manager.")
        return self.transport

    def request_json(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        body: RequestBody | None = None,
        params: Params = None,
    ) -> Any:
        """Make a request and return the decoded JSON body.

        Args:
            method: HTTP method
            url: Absolute URL
            headers: Extra request headers
            body: Request payload
            params: Query parameters

        Returns:
            Response data

        Raises:
            APIError: On a non-success status or an undecodable body
            TimeoutError: If the transport timed out

        """
        transport = self.require_transport()
        method_name = f"{method} {url}"
        self.logger.debug(f"Making request: {method_name}")

        try:
            response = transport.request(url, method=method, headers=headers, body=body, params=params)
        except requests.exceptions.Timeout:
            raise TimeoutError(method_name, self.config.request_timeout) from None

        with response:
            if 200 <= response.status_code < 300:
                try:
                    return response.json()
                except ValueError:
                    raise APIError(
                        response.status_code,
                        f"Invalid JSON in response to {method_name}",
                        truncate(response.text),
                    ) from None

            self._raise_for_status(response, method_name)

    def fetch_page(self, url: str) -> tuple[bool, str]:
        """GET an HTML page without raising on error statuses.

        Returns:
            Tuple of (successful status, body text)

        """
        transport = self.require_transport()
        self.logger.debug(f"Fetching page {url}")
        with transport.request(url, method="GET") as response:
            return 200 <= response.status_code < 300, response.text

    def _raise_for_status(self, response: requests.Response, method_name: str) -> None:
        response_text = truncate(response.text)

        # Map status codes to exceptions
        error_map = {
            401: lambda: AuthenticationError(f"Unauthorized access in {method_name}", response_text),
            403: lambda: PermissionError(f"Access forbidden in {method_name}", response_text),
            404: lambda: NotFoundError(f"Resource not found in {method_name}", response_text),
            408: lambda: TimeoutError(method_name, self.config.request_timeout),
            429: lambda: RateLimitError(
                f"Rate limit exceeded in {method_name}",
                response_text,
                parse_retry_after(response.headers.get("Retry-After")),
            ),
        }

        # Check for specific error or server error
        if response.status_code in error_map:
            raise error_map[response.status_code]()
        elif 500 <= response.status_code < 600:
            raise APIError(response.status_code, f"Server error in {method_name}", response_text)
        else:
            raise APIError(
                response.status_code,
                f"Unexpected response status {response.status_code} in {method_name}",
                response_text,
            )
