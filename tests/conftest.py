"""Shared test fixtures for aepclient.

Provides the bookstore fixture documents (OpenAPI 3.1 and Swagger 2.0), a
hand-built book resource, an HTTP recorder for driving :class:`Client`
through :class:`httpx.MockTransport`, and config isolation.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Iterator

import httpx
import pytest

from aepclient.openapi.document import OpenAPIDocument
from aepclient.resource import CreateMethod, ListMethod, Resource


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Raw document fixtures (plain dicts loaded from JSON files)
# ---------------------------------------------------------------------------


@pytest.fixture
def bookstore_oas3_raw() -> dict[str, Any]:
    """Load the raw OpenAPI 3.1 bookstore document."""
    with open(FIXTURES_DIR / "bookstore_oas3.json") as f:
        return json.load(f)


@pytest.fixture
def bookstore_oas2_raw() -> dict[str, Any]:
    """Load the raw Swagger 2.0 bookstore document."""
    with open(FIXTURES_DIR / "bookstore_oas2.json") as f:
        return json.load(f)


@pytest.fixture
def oas3_document(bookstore_oas3_raw: dict[str, Any]) -> OpenAPIDocument:
    return OpenAPIDocument.from_dict(bookstore_oas3_raw)


@pytest.fixture
def oas2_document(bookstore_oas2_raw: dict[str, Any]) -> OpenAPIDocument:
    return OpenAPIDocument.from_dict(bookstore_oas2_raw)


# ---------------------------------------------------------------------------
# Resource fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def book_resource() -> Resource:
    """A book resource under publishers, without user-settable ids."""
    return Resource(
        singular="book",
        plural="books",
        pattern_elems=["publishers", "{publisher}", "books", "{book}"],
        create_method=CreateMethod(supports_user_settable_create=False),
        list_method=ListMethod(),
    )


# ---------------------------------------------------------------------------
# HTTP fixtures
# ---------------------------------------------------------------------------


class Recorder:
    """Collects the requests a mock transport receives."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []
        self._handler = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def make_http() -> Iterator[Callable[..., tuple[httpx.Client, Recorder]]]:
    """Factory returning an ``httpx.Client`` backed by a recording mock transport."""
    clients: list[httpx.Client] = []

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> tuple[httpx.Client, Recorder]:
        recorder = Recorder(handler)
        http = httpx.Client(transport=httpx.MockTransport(recorder))
        clients.append(http)
        return http, recorder

    yield _make
    for http in clients:
        http.close()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the config directory at *tmp_path* and clear AEPCLIENT_* variables."""
    monkeypatch.setattr("aepclient.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    for var in ["AEPCLIENT_TIMEOUT", "NO_COLOR"]:
        monkeypatch.delenv(var, raising=False)
    return tmp_path
