"""
HTTP client convenience layer.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from httpsupport.config import ClientConfig, get_config
from httpsupport.exceptions import TransportError
from httpsupport.http.formats import serialize_xml
from httpsupport.http.response import HTTPResponse
from httpsupport.logging_config import track_error

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
XML_CONTENT_TYPE = "application/xml; charset=UTF-8"


def _has_header(headers: Mapping[str, str], name: str) -> bool:
    name = name.lower()
    return any(key.lower() == name for key in headers)


class HTTPClient:
    """
    Synchronous HTTP client returning HTTPResponse wrappers.

    Connection handling, TLS and redirects are left to httpx. A custom
    httpx transport can be passed in, e.g. httpx.MockTransport in tests.

    Usage:
        with HTTPClient(base_uri="https://api.example.com") as client:
            resp = client.get_json("/users", {"page": 2})
            if resp.is_ok:
                users = resp.data
    """

    def __init__(
        self,
        base_uri: str | None = None,
        timeout: float | None = None,
        verify_ssl: bool | None = None,
        config: ClientConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.config = config or get_config()
        self._base_uri = base_uri if base_uri is not None else self.config.base_uri
        self.timeout = timeout if timeout is not None else self.config.timeout
        self.verify_ssl = verify_ssl if verify_ssl is not None else self.config.verify_ssl
        self.transport = transport
        self._client: httpx.Client | None = None

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @property
    def base_uri(self) -> str:
        return self._base_uri

    @base_uri.setter
    def base_uri(self, value: str) -> None:
        self._base_uri = value
        if self._client is not None and not self._client.is_closed:
            self._client.base_url = value

    def set_base_uri(self, base_uri: str) -> "HTTPClient":
        """Set the base URI; returns the client for chaining."""
        self.base_uri = base_uri
        return self

    def _get_client(self) -> httpx.Client:
        """Get or create the httpx client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                base_url=self._base_uri,
                headers={"User-Agent": self.config.user_agent},
                timeout=httpx.Timeout(self.timeout),
                verify=self.verify_ssl,
                follow_redirects=self.config.follow_redirects,
                transport=self.transport,
            )
        return self._client

    def close(self) -> None:
        """Close the underlying httpx client."""
        if self._client and not self._client.is_closed:
            self._client.close()

    def request(
        self,
        method: str,
        url: str,
        params: Mapping[str, Any] | None = None,
        data: Mapping[str, Any] | None = None,
        content: str | bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> HTTPResponse:
        """
        Make an HTTP request.

        Args:
            method: HTTP method
            url: Absolute URL, or endpoint relative to the base URI
            params: Query string parameters
            data: Form parameters, sent URL-encoded
            content: Raw request body
            headers: Request headers

        Returns:
            HTTPResponse wrapping the response, whatever its status code

        Raises:
            TransportError: If httpx fails to complete the request
        """
        method = method.upper()
        client = self._get_client()
        logger.debug(f"{method} {url} params={dict(params or {})}")

        try:
            response = client.request(
                method,
                url,
                params=params or None,
                data=data,
                content=content,
                headers=dict(headers or {}),
            )
        except httpx.HTTPError as e:
            error = TransportError(f"{method} {url} failed: {e}", method=method, url=url)
            error.__cause__ = e
            track_error(error)
            raise error

        logger.debug(f"{method} {url} -> {response.status_code}")
        return HTTPResponse(response)

    def get(
        self,
        endpoint: str,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> HTTPResponse:
        """Make a GET request."""
        return self.request("GET", endpoint, params=query, headers=headers)

    def get_json(
        self,
        endpoint: str,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> HTTPResponse:
        """Make a GET request asking for JSON."""
        headers = dict(headers or {})
        headers["Accept"] = JSON_CONTENT_TYPE
        return self.get(endpoint, query, headers)

    def _send(
        self,
        method: str,
        endpoint: str,
        params: Mapping[str, Any] | str | bytes,
        headers: Mapping[str, str] | None,
    ) -> HTTPResponse:
        # Mappings go out as form params, anything else as the raw body
        if isinstance(params, Mapping):
            return self.request(method, endpoint, data=params, headers=headers)
        return self.request(method, endpoint, content=params, headers=headers)

    def post(
        self,
        endpoint: str,
        params: Mapping[str, Any] | str | bytes,
        headers: Mapping[str, str] | None = None,
    ) -> HTTPResponse:
        """Make a POST request with form params or a raw body."""
        return self._send("POST", endpoint, params, headers)

    def post_json(
        self,
        endpoint: str,
        params: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> HTTPResponse:
        """Make a POST request with a JSON body."""
        headers = dict(headers or {})
        headers["Accept"] = JSON_CONTENT_TYPE
        headers["Content-Type"] = JSON_CONTENT_TYPE
        return self.post(endpoint, json.dumps(params if params is not None else []), headers)

    def post_xml(
        self,
        endpoint: str,
        data: Any,
        headers: Mapping[str, str] | None = None,
    ) -> HTTPResponse:
        """
        Make a POST request with an XML body.

        Elements and element trees are serialized as they are, str/bytes
        are sent verbatim and anything else goes through array_to_xml().
        """
        headers = dict(headers or {})
        if not _has_header(headers, "Content-Type"):
            headers["Content-Type"] = XML_CONTENT_TYPE
        return self.post(endpoint, serialize_xml(data), headers)

    def put(
        self,
        endpoint: str,
        params: Mapping[str, Any] | str | bytes,
        headers: Mapping[str, str] | None = None,
    ) -> HTTPResponse:
        """Make a PUT request with form params or a raw body."""
        return self._send("PUT", endpoint, params, headers)

    def put_json(
        self,
        endpoint: str,
        params: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> HTTPResponse:
        """Make a PUT request with a JSON body."""
        headers = dict(headers or {})
        headers["Accept"] = JSON_CONTENT_TYPE
        headers["Content-Type"] = JSON_CONTENT_TYPE
        return self.put(endpoint, json.dumps(params if params is not None else []), headers)


def parse_headers(header_strings: list[str]) -> dict[str, str]:
    """Parse header strings in 'Name: Value' format."""
    headers = {}
    for h in header_strings:
        if ":" in h:
            name, value = h.split(":", 1)
            headers[name.strip()] = value.strip()
    return headers


def parse_params(param_strings: list[str]) -> dict[str, str]:
    """Parse parameter strings in 'name=value' format."""
    params = {}
    for p in param_strings:
        if "=" in p:
            name, value = p.split("=", 1)
            params[name] = value
    return params
