"""Shared fixtures: fake upstream services and a wired TestClient."""

import asyncio
from typing import Any, Callable, Dict, List

import httpx
import pytest
from fastapi.testclient import TestClient

from app.catalog.router import get_http_client
from app.catalog.upstream_service import create_client
from app.config import Settings, get_settings
from app.main import app

AUTHORS_URL = "http://authors.test"
BOOKS_URL = "http://books.test"

Handler = Callable[[httpx.Request], httpx.Response]


def json_response(payload: Any, status_code: int = 200) -> Handler:
    return lambda request: httpx.Response(status_code, json=payload)


def raw_response(content: bytes, status_code: int = 200) -> Handler:
    return lambda request: httpx.Response(status_code, content=content)


def connection_refused() -> Handler:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    return handler


class BrokenStream(httpx.AsyncByteStream):
    """A body that fails half-way through reading."""

    async def __aiter__(self):
        raise httpx.ReadError("Connection reset by peer")
        yield b""  # pragma: no cover


def broken_body() -> Handler:
    return lambda request: httpx.Response(200, stream=BrokenStream())


def redirect_to(location: str, status_code: int = 307) -> Handler:
    return lambda request: httpx.Response(status_code, headers={"Location": location})


def delayed_response(delay: float, payload: Any = None) -> Handler:
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(delay)
        return httpx.Response(200, json=payload if payload is not None else [])

    return handler


class SlowStream(httpx.AsyncByteStream):
    """A body that trickles in one byte at a time."""

    def __init__(self, content: bytes, delay: float):
        self.content = content
        self.delay = delay

    async def __aiter__(self):
        for i in range(len(self.content)):
            await asyncio.sleep(self.delay)
            yield self.content[i:i + 1]


def slow_body(content: bytes, delay: float) -> Handler:
    return lambda request: httpx.Response(200, stream=SlowStream(content, delay))


class FakeUpstreams:
    """Routes ``/authors`` and ``/books`` to configurable handlers and records calls."""

    def __init__(self, authors: Handler = None, books: Handler = None):
        self.routes: Dict[str, Handler] = {
            "/authors": authors or json_response([]),
            "/books": books or json_response([]),
        }
        self.calls: List[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request.url.path)
        return self.routes[request.url.path](request)

    def client(self) -> httpx.AsyncClient:
        return create_client(transport=httpx.MockTransport(self))


def make_settings(**overrides) -> Settings:
    values = {
        "authors_service_url": AUTHORS_URL,
        "books_service_url": BOOKS_URL,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def upstreams() -> FakeUpstreams:
    return FakeUpstreams()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def client(upstreams: FakeUpstreams, settings: Settings):
    async def override_http_client():
        async with upstreams.client() as http_client:
            yield http_client

    app.dependency_overrides[get_http_client] = override_http_client
    app.dependency_overrides[get_settings] = lambda: settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
