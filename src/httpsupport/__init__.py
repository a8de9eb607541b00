"""
httpsupport - HTTP client convenience layer

A thin wrapper around httpx for issuing GET/POST/PUT requests, with a
response object that classifies status codes, sniffs the body format
(JSON, URL-encoded, XML), decodes it lazily and saves media to disk.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

__version__ = "0.1.0"
__author__ = "DNS Science.io"
__copyright__ = "Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company"

from httpsupport.exceptions import (
    DecodeError,
    HTTPSupportError,
    InvalidArgumentError,
    InvalidMediaError,
    TransportError,
)
from httpsupport.http import HTTPClient, HTTPResponse

__all__ = [
    "HTTPClient",
    "HTTPResponse",
    "HTTPSupportError",
    "TransportError",
    "DecodeError",
    "InvalidArgumentError",
    "InvalidMediaError",
]
