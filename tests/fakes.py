"""In-memory transport that records requests and replays scripted responses, plus wire fixtures."""

import json
from dataclasses import dataclass, field
from typing import Any

from gcweb.api.transport import RequestBody

WEBSITE = "https://www.geocaching.com"
API_PROXY = f"{WEBSITE}/api/proxy"


class FakeResponse:
    """Just enough of ``requests.Response`` for the client."""

    def __init__(
        self,
        status_code: int = 200,
        json_data: Any = None,
        text: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        if text is None:
            text = "" if json_data is None else json.dumps(json_data)
        self.text = text
        self.headers = headers or {}
        self.closed = False

    def json(self) -> Any:
        return json.loads(self.text)

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


@dataclass
class RecordedRequest:
    uri: str
    method: str
    headers: dict[str, str] | None
    body: RequestBody | None
    params: Any

    @property
    def param_pairs(self) -> list[tuple[str, str]]:
        if isinstance(self.params, dict):
            return list(self.params.items())
        return list(self.params or [])

    def param(self, key: str) -> str | None:
        return dict(self.param_pairs).get(key)


@dataclass
class FakeTransport:
    """Replays queued responses in order; an exception in the queue is raised instead."""

    responses: list[Any] = field(default_factory=list)
    requests: list[RecordedRequest] = field(default_factory=list)
    closed: bool = False

    def queue(self, *responses: Any) -> "FakeTransport":
        self.responses.extend(responses)
        return self

    def request(
        self,
        uri: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        body: RequestBody | None = None,
        params: Any = None,
    ) -> FakeResponse:
        self.requests.append(RecordedRequest(uri, method, headers, body, params))
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {uri}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed = True

    @property
    def call_count(self) -> int:
        return len(self.requests)


def log_page(token: str | None = "tok-123", status_code: int = 200, extra: str = "") -> FakeResponse:
    """HTML of a log page, with the token embedded the way the site does it."""
    script = f'{{"csrfToken":"{token}"}}' if token else "{}"
    return FakeResponse(status_code=status_code, text=f"<html><script>window.__data={script};{extra}</script></html>")


def search_record(code: str, **overrides: Any) -> dict[str, Any]:
    """A search hit in wire format."""
    record = {
        "id": 1,
        "name": f"Cache {code}",
        "code": code,
        "premiumOnly": False,
        "favoritePoints": 3,
        "geocacheType": 2,
        "containerType": 8,
        "difficulty": 1.5,
        "terrain": 2.0,
        "userFound": False,
        "userDidNotFind": False,
        "cacheStatus": 0,
        "postedCoordinates": {"latitude": 52.0, "longitude": 13.0},
        "placedDate": "2015-06-01T00:00:00",
        "owner": {"code": "PR1", "username": "owner"},
        "lastFoundDate": "2024-03-01T10:00:00",
        "trackableCount": 0,
        "region": "Berlin",
        "country": "Germany",
        "attributes": [],
    }
    record.update(overrides)
    return record


