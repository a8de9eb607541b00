"""
HTTP request and response helpers.

Provides:
- GET/POST/PUT requests with form, JSON and XML bodies
- Response status predicates
- JSON, URL-encoded and XML body detection and decoding
- Saving media responses to disk

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from httpsupport.http.client import HTTPClient
from httpsupport.http.formats import (
    array_to_xml,
    decode,
    detect_format,
    xml_to_dict,
)
from httpsupport.http.response import HTTPResponse

__all__ = [
    "HTTPClient",
    "HTTPResponse",
    "array_to_xml",
    "decode",
    "detect_format",
    "xml_to_dict",
]
