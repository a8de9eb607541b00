"""
Exceptions raised by httpsupport.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""


class HTTPSupportError(Exception):
    """Base exception for httpsupport errors."""
    pass


class TransportError(HTTPSupportError):
    """The underlying HTTP transport failed (connection, TLS, timeout...)."""

    def __init__(self, message: str, method: str | None = None, url: str | None = None):
        super().__init__(message)
        self.method = method
        self.url = url


class DecodeError(HTTPSupportError, ValueError):
    """Response body could not be decoded in its detected format."""

    def __init__(self, message: str, format: str | None = None):
        super().__init__(message)
        self.format = format


class InvalidArgumentError(HTTPSupportError, ValueError):
    """An argument such as a save directory is unusable."""
    pass


class InvalidMediaError(HTTPSupportError, RuntimeError):
    """Response content does not look like media that can be saved."""
    pass
