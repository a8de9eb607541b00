"""
Body format detection, decoding and XML building.

Formats are identified by name: "json", "urlencoded" or "xml". Detection
looks at the Content-Type header first and falls back to the shape of
the body; anything else is left undetected (None).

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import dataclasses
import json
import re
from collections.abc import Mapping
from enum import Enum
from typing import Any
from urllib.parse import parse_qsl
import xml.etree.ElementTree as ET

from httpsupport.exceptions import DecodeError, InvalidArgumentError


JSON = "json"
URLENCODED = "urlencoded"
XML = "xml"

# Content-Type keywords, checked in priority order
CONTENT_TYPE_KEYWORDS = (JSON, URLENCODED, XML)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

_JSON_BODY = re.compile(r"\{.*\}", re.DOTALL)
_URLENCODED_BODY = re.compile(r"[^=&]+=[^=&]+(?:&[^=&]+=[^=&]+)*")
_XML_BODY = re.compile(r"<.*>", re.DOTALL)

_SCALAR_TYPES = (str, bytes, int, float, bool, Enum)

# XML 1.0 Name production
_NAME_START_CHARS = (
    ":A-Z_a-z\u00C0-\u00D6\u00D8-\u00F6\u00F8-\u02FF\u0370-\u037D\u037F-\u1FFF"
    "\u200C-\u200D\u2070-\u218F\u2C00-\u2FEF\u3001-\uD7FF\uF900-\uFDCF\uFDF0-\uFFFD"
    "\U00010000-\U000EFFFF"
)
_NAME_CHARS = _NAME_START_CHARS + "\\-.0-9\u00B7\u0300-\u036F\u203F-\u2040"
_XML_NAME = re.compile(f"[{_NAME_START_CHARS}][{_NAME_CHARS}]*")


def detect_format_by_content_type(content_type: str | None) -> str | None:
    """Detect format from a Content-Type header value."""
    if not content_type:
        return None
    ct = content_type.lower()
    for keyword in CONTENT_TYPE_KEYWORDS:
        if keyword in ct:
            return keyword
    return None


def detect_format_by_content(content: str | None) -> str | None:
    """Detect format from the raw body text."""
    if not content:
        return None
    body = content.strip()
    if _JSON_BODY.fullmatch(body):
        return JSON
    if _URLENCODED_BODY.fullmatch(body):
        return URLENCODED
    if _XML_BODY.fullmatch(body):
        return XML
    return None


def detect_format(content_type: str | None, content: str | None) -> str | None:
    """Detect format, the header taking precedence over body sniffing."""
    return detect_format_by_content_type(content_type) or detect_format_by_content(content)


def decode(format: str | None, text: str) -> Any:
    """
    Decode body text in the given format.

    Args:
        format: One of "json", "urlencoded", "xml"; anything else yields None
        text: Body text

    Returns:
        Decoded mapping/sequence, or None for an unknown format or an
        empty body

    Raises:
        DecodeError: If the body is malformed for its format
    """
    if not text or not text.strip():
        return None
    if format == JSON:
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise DecodeError(f"Invalid JSON response: {e}", format=JSON) from e
    if format == URLENCODED:
        # dict() keeps the last value of a repeated key
        return dict(parse_qsl(text, keep_blank_values=True))
    if format == XML:
        try:
            root = ET.fromstring(text.strip())
        except ET.ParseError as e:
            raise DecodeError(f"Invalid XML response: {e}", format=XML) from e
        if len(root) == 0:
            return root.text or {}
        return xml_to_dict(root)
    return None


def xml_to_dict(element: ET.Element) -> dict[str, Any]:
    """Convert the children of an element to a dict.

    Leaf elements become strings, nested elements become dicts and
    repeated sibling tags are gathered into a list. Attributes are dropped.
    """
    result: dict[str, Any] = {}
    for child in element:
        if len(child):
            value = xml_to_dict(child)
        else:
            value = child.text or ""

        if child.tag not in result:
            result[child.tag] = value
        elif isinstance(result[child.tag], list):
            result[child.tag].append(value)
        else:
            result[child.tag] = [result[child.tag], value]
    return result


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_object(value: Any) -> bool:
    if value is None or isinstance(value, _SCALAR_TYPES) or isinstance(value, type):
        return False
    if isinstance(value, Mapping) or _is_sequence(value):
        return False
    return dataclasses.is_dataclass(value) or hasattr(value, "__dict__")


def _public_fields(obj: Any) -> dict[str, Any]:
    if dataclasses.is_dataclass(obj):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    return {k: v for k, v in vars(obj).items() if not k.startswith("_")}


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return _to_text(value.value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _tag(name: Any) -> str:
    tag = str(name)
    if not _XML_NAME.fullmatch(tag):
        raise InvalidArgumentError(f"'{tag}' is not a valid XML element name.")
    return tag


def build_xml(element: ET.Element, data: Any) -> None:
    """Append data to element.

    Mapping keys become tag names and sequence entries use the tag "item".
    Objects are written as an element named after their class, holding
    their public fields; an object found in a sequence is attached to the
    parent directly instead of being wrapped in "item". Keys that are not
    valid XML names raise InvalidArgumentError.
    """
    if isinstance(data, Mapping) or _is_sequence(data):
        items = data.items() if isinstance(data, Mapping) else enumerate(data)
        for name, value in items:
            if isinstance(name, int) and _is_object(value):
                build_xml(element, value)
                continue

            tag = "item" if isinstance(name, int) else _tag(name)
            child = ET.SubElement(element, tag)
            if isinstance(value, Mapping) or _is_sequence(value) or _is_object(value):
                build_xml(child, value)
            else:
                child.text = _to_text(value)
    elif _is_object(data):
        child = ET.SubElement(element, type(data).__name__)
        build_xml(child, _public_fields(data))
    else:
        element.text = _to_text(data)


def array_to_xml(data: Any, root: str = "xml") -> str:
    """Serialize a mapping/sequence/object to an XML document."""
    root_element = ET.Element(_tag(root))
    build_xml(root_element, data)
    return XML_DECLARATION + ET.tostring(root_element, encoding="unicode")


def serialize_xml(payload: Any) -> str | bytes:
    """Turn a post_xml payload into a request body."""
    if isinstance(payload, ET.ElementTree):
        payload = payload.getroot()
    if isinstance(payload, ET.Element):
        return XML_DECLARATION + ET.tostring(payload, encoding="unicode")
    if isinstance(payload, (str, bytes)):
        return payload
    return array_to_xml(payload)
