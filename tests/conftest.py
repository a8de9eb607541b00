"""
Pytest configuration and shared fixtures for httpsupport tests.
"""

import logging

import httpx
import pytest

from httpsupport.config import ClientConfig, set_config
from httpsupport.http.response import HTTPResponse


@pytest.fixture(autouse=True)
def default_config():
    """Isolate tests from HTTPSUPPORT_* variables and .env files."""
    config = ClientConfig()
    set_config(config)
    yield config
    set_config(None)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers the CLI installs on the package logger."""
    yield
    logger = logging.getLogger("httpsupport")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def make_response():
    """Build an HTTPResponse around an in-memory httpx.Response."""
    def _make(status_code: int = 200, content: bytes | str = b"",
              content_type: str | None = None, headers: dict | None = None) -> HTTPResponse:
        all_headers = dict(headers or {})
        if content_type is not None:
            all_headers["Content-Type"] = content_type
        if isinstance(content, str):
            content = content.encode("utf-8")
        return HTTPResponse(httpx.Response(status_code, headers=all_headers, content=content))
    return _make


class Recorder:
    """httpx.MockTransport handler that remembers requests."""

    def __init__(self, status_code: int = 200, content: bytes = b"", headers: dict | None = None):
        self.requests: list[httpx.Request] = []
        self.status_code = status_code
        self.content = content
        self.headers = headers or {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, headers=self.headers, content=self.content)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def recorder():
    return Recorder(content=b'{"ok": true}', headers={"Content-Type": "application/json"})


@pytest.fixture
def transport(recorder):
    return httpx.MockTransport(recorder)
