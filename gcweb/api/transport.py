"""HTTP transport used by the client, with a default requests-based adapter."""

import logging
from dataclasses import dataclass
from typing import Any, Protocol
from urllib.parse import urlparse

import backoff
import requests

from gcweb.config import Config
from gcweb.core.constants import USER_AGENT, APIConstants

logger = logging.getLogger(__name__)

AUTH_COOKIE_NAME = "gspkauth"

Params = list[tuple[str, str]] | dict[str, str] | None


@dataclass
class RequestBody:
    """Request payload: a JSON document, a form, or a multipart upload.

    ``files`` maps form field names to ``(filename, content, content_type)``.
    """

    json: Any = None
    form: dict[str, str] | None = None
    files: dict[str, tuple[str, bytes, str]] | None = None


class Transport(Protocol):
    """Performs a single HTTP request on an authenticated session."""

    def request(
        self,
        uri: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        body: RequestBody | None = None,
        params: Params = None,
    ) -> requests.Response: ...

    def close(self) -> None: ...


class RequestsTransport:
    """Transport backed by a ``requests.Session``.

    The session is expected to be authenticated already, either handed over by
    the caller or primed with the session cookie from configuration.
    """

    def __init__(self, session: requests.Session | None = None, config: Config | None = None) -> None:
        self.config = config or Config()
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = USER_AGENT
            if self.config.auth_cookie:
                # only sent to the website host
                session.cookies.set(
                    AUTH_COOKIE_NAME,
                    self.config.auth_cookie.get_secret_value(),
                    domain=urlparse(self.config.website_url).hostname,
                )
        self.session = session
        self.timeout = self.config.request_timeout

    @backoff.on_exception(
        backoff.expo,
        (requests.exceptions.ConnectionError, requests.exceptions.Timeout),
        max_tries=APIConstants.BACKOFF_MAX_TRIES,
        factor=APIConstants.BACKOFF_FACTOR,
        max_value=APIConstants.BACKOFF_MAX_VALUE,
    )
    def request(
        self,
        uri: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        body: RequestBody | None = None,
        params: Params = None,
    ) -> requests.Response:
        """Send a request and return the unread response."""
        kwargs: dict[str, Any] = {"headers": headers, "params": params, "timeout": self.timeout}
        if body is not None:
            if body.json is not None:
                kwargs["json"] = body.json
            if body.form is not None:
                kwargs["data"] = body.form
            if body.files is not None:
                kwargs["files"] = body.files

        logger.debug(f"{method} {uri}")
        return self.session.request(method, uri, **kwargs)

    def close(self) -> None:
        self.session.close()
