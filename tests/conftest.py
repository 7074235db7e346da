"""
Shared fixtures: an in-memory stand-in for `requests.Session`.

Routes map a full URL (query string excluded) to a FakeResponse, an
exception instance to raise, or a callable returning either.
"""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Union

import pytest
import requests

from logo_importer.config import ImporterSettings, ScrapeHTTPSettings, StoryblokSettings


class FakeResponse:
    def __init__(
        self,
        status_code: int = 200,
        *,
        text: str | None = None,
        json_data: Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        self.headers = headers or {}
        if content is not None:
            self.content = content
        elif json_data is not None:
            self.content = json.dumps(json_data).encode("utf-8")
        else:
            self.content = (text or "").encode("utf-8")

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        return json.loads(self.content.decode("utf-8"))

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"status={self.status_code}", response=self)


@dataclass
class RecordedCall:
    method: str
    url: str
    kwargs: dict[str, Any] = field(default_factory=dict)


Route = Union[FakeResponse, Exception, Callable[..., Any]]


class FakeSession:
    def __init__(self, routes: dict[tuple[str, str] | str, Route] | None = None) -> None:
        self.routes: dict[tuple[str, str] | str, Route] = dict(routes or {})
        self.calls: list[RecordedCall] = []
        self._lock = threading.Lock()

    def add(self, url: str, route: Route, *, method: str | None = None) -> None:
        self.routes[(method.upper(), url) if method else url] = route

    def calls_to(self, url: str, method: str | None = None) -> list[RecordedCall]:
        return [
            call
            for call in self.calls
            if call.url == url and (method is None or call.method == method.upper())
        ]

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        method = method.upper()
        with self._lock:
            self.calls.append(RecordedCall(method=method, url=url, kwargs=kwargs))
        route = self.routes.get((method, url), self.routes.get(url))
        if route is None:
            return FakeResponse(404, text="not found")
        if isinstance(route, Exception):
            raise route
        if callable(route):
            route = route(method=method, url=url, **kwargs)
            if isinstance(route, Exception):
                raise route
        return route

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self.request("POST", url, **kwargs)

    def put(self, url: str, **kwargs: Any) -> FakeResponse:
        return self.request("PUT", url, **kwargs)


@pytest.fixture()
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture()
def http_settings() -> ScrapeHTTPSettings:
    return ScrapeHTTPSettings(
        user_agent="test-agent",
        timeout_seconds=1.0,
        max_retries=0,
        backoff_initial_seconds=0.0,
        backoff_multiplier=1.0,
    )


@pytest.fixture()
def storyblok_settings() -> StoryblokSettings:
    return StoryblokSettings(
        management_base_url="https://mapi.test/v1",
        cdn_base_url="https://cdn.test/v2",
        rate_limit_per_second=1000.0,
        timeout_seconds=1.0,
        max_retries=0,
        backoff_initial_seconds=0.0,
        backoff_multiplier=1.0,
    )


@pytest.fixture()
def importer_settings(tmp_path) -> ImporterSettings:
    return ImporterSettings(
        data_dir=str(tmp_path / "data"),
        input_file=str(tmp_path / "in.csv"),
        concurrency_limit=4,
    )
