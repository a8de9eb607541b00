"""
Tests for body format detection, decoding and XML building.
"""

from dataclasses import dataclass
import xml.etree.ElementTree as ET

import pytest

from httpsupport.exceptions import DecodeError, InvalidArgumentError
from httpsupport.http.formats import (
    array_to_xml,
    decode,
    detect_format,
    detect_format_by_content,
    detect_format_by_content_type,
    serialize_xml,
    xml_to_dict,
)


# =============================================================================
# Detection
# =============================================================================

class TestDetectByContentType:

    @pytest.mark.parametrize("content_type", [
        "application/json",
        "APPLICATION/JSON; charset=utf-8",
        "application/vnd.api+json",
        "text/x-JSON",
    ])
    def test_json_anywhere_any_case(self, content_type):
        assert detect_format_by_content_type(content_type) == "json"

    def test_urlencoded(self):
        assert detect_format_by_content_type("application/x-www-form-urlencoded") == "urlencoded"

    def test_xml(self):
        assert detect_format_by_content_type("text/xml; charset=GBK") == "xml"
        assert detect_format_by_content_type("application/atom+xml") == "xml"

    def test_first_keyword_wins(self):
        assert detect_format_by_content_type("application/xml+json") == "json"

    def test_unknown_or_empty(self):
        assert detect_format_by_content_type("text/html") is None
        assert detect_format_by_content_type("") is None
        assert detect_format_by_content_type(None) is None


class TestDetectByContent:

    def test_json_object(self):
        assert detect_format_by_content('{"a":1}') == "json"

    def test_multiline_json(self):
        assert detect_format_by_content('{\n  "a": 1\n}\n') == "json"

    def test_urlencoded(self):
        assert detect_format_by_content("a=1&b=2") == "urlencoded"
        assert detect_format_by_content("token=abc") == "urlencoded"

    def test_urlencoded_rejects_empty_parts(self):
        assert detect_format_by_content("a=&b=2") is None
        assert detect_format_by_content("a==1") is None

    def test_xml(self):
        assert detect_format_by_content("<a><b>1</b></a>") == "xml"
        assert detect_format_by_content("  <a>\n<b>1</b>\n</a>\n") == "xml"

    def test_undetected(self):
        assert detect_format_by_content("plain text") is None
        assert detect_format_by_content("[1, 2]") is None
        assert detect_format_by_content("") is None


def test_header_takes_precedence_over_body():
    assert detect_format("application/json", "a=1&b=2") == "json"
    assert detect_format("text/plain", "a=1&b=2") == "urlencoded"
    assert detect_format(None, "nothing here") is None


# =============================================================================
# Decoding
# =============================================================================

class TestDecode:

    def test_json(self):
        assert decode("json", '{"a": 1, "b": [1, 2]}') == {"a": 1, "b": [1, 2]}

    def test_malformed_json(self):
        with pytest.raises(DecodeError) as exc_info:
            decode("json", "{not json}")
        assert exc_info.value.format == "json"
        assert isinstance(exc_info.value, ValueError)

    def test_urlencoded(self):
        assert decode("urlencoded", "a=1&b=2") == {"a": "1", "b": "2"}

    def test_urlencoded_last_duplicate_wins(self):
        assert decode("urlencoded", "a=1&b=2&a=3") == {"a": "3", "b": "2"}

    def test_urlencoded_unquotes(self):
        assert decode("urlencoded", "name=John+Doe&city=S%C3%A3o%20Paulo") == {
            "name": "John Doe",
            "city": "São Paulo",
        }

    def test_xml_drops_root(self):
        assert decode("xml", "<a><b>1</b></a>") == {"b": "1"}

    def test_xml_nested(self):
        body = "<xml><code>0</code><result><id>42</id><name>test</name></result></xml>"
        assert decode("xml", body) == {"code": "0", "result": {"id": "42", "name": "test"}}

    def test_xml_cdata(self):
        assert decode("xml", "<xml><msg><![CDATA[<ok>]]></msg></xml>") == {"msg": "<ok>"}

    def test_malformed_xml(self):
        with pytest.raises(DecodeError) as exc_info:
            decode("xml", "<a><b></a>")
        assert exc_info.value.format == "xml"

    @pytest.mark.parametrize("fmt", ["json", "xml", "urlencoded"])
    @pytest.mark.parametrize("text", ["", "   \n"])
    def test_empty_body(self, fmt, text):
        assert decode(fmt, text) is None

    def test_unknown_format(self):
        assert decode(None, "whatever") is None


class TestXmlToDict:

    def test_repeated_siblings_become_list(self):
        root = ET.fromstring("<r><item>1</item><item>2</item><item>3</item></r>")
        assert xml_to_dict(root) == {"item": ["1", "2", "3"]}

    def test_attributes_are_dropped(self):
        root = ET.fromstring('<r><a id="7">x</a></r>')
        assert xml_to_dict(root) == {"a": "x"}

    def test_empty_leaf(self):
        root = ET.fromstring("<r><a/></r>")
        assert xml_to_dict(root) == {"a": ""}


# =============================================================================
# XML building
# =============================================================================

@dataclass
class Goods:
    name: str
    price: int


class Order:
    def __init__(self, order_id, paid):
        self.order_id = order_id
        self.paid = paid
        self._secret = "hidden"


class TestArrayToXml:

    def test_document_with_synthetic_root(self):
        xml = array_to_xml({"a": 1})
        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert xml.endswith("<xml><a>1</a></xml>")

    def test_custom_root(self):
        assert array_to_xml({"a": 1}, root="request").endswith("<request><a>1</a></request>")

    def test_sequence_entries_use_item(self):
        xml = array_to_xml({"ids": [1, 2], "rows": [{"x": 1}]})
        assert "<ids><item>1</item><item>2</item></ids>" in xml
        assert "<rows><item><x>1</x></item></rows>" in xml

    def test_object_uses_class_name_and_public_fields(self):
        xml = array_to_xml({"order": Order("A1", True)})
        assert "<order><Order><order_id>A1</order_id><paid>true</paid></Order></order>" in xml
        assert "_secret" not in xml

    def test_objects_in_sequence_are_flattened(self):
        xml = array_to_xml([Goods("pen", 3), Goods("ink", 5)])
        assert xml.endswith(
            "<xml><Goods><name>pen</name><price>3</price></Goods>"
            "<Goods><name>ink</name><price>5</price></Goods></xml>"
        )

    def test_text_is_escaped(self):
        assert "<q>a &amp; b &lt;c&gt;</q>" in array_to_xml({"q": "a & b <c>"})

    def test_none_is_empty(self):
        assert "<a />" in array_to_xml({"a": None})

    @pytest.mark.parametrize("key", ["my key", "2x", "", "a<b", "-lead"])
    def test_invalid_element_name_rejected(self, key):
        with pytest.raises(InvalidArgumentError, match="not a valid XML element name"):
            array_to_xml({key: 1})

    def test_invalid_root_rejected(self):
        with pytest.raises(ValueError):
            array_to_xml({"a": 1}, root="bad root")

    def test_valid_unusual_names(self):
        xml = array_to_xml({"_x.y-z": 2, "größe": 3})
        assert decode("xml", xml) == {"_x.y-z": "2", "größe": "3"}

    def test_round_trip_keeps_scalar_leaves(self):
        data = {"appid": "wx123", "detail": {"amount": "100", "currency": "CNY"}}
        assert decode("xml", array_to_xml(data)) == data


class TestSerializeXml:

    def test_element(self):
        root = ET.Element("req")
        ET.SubElement(root, "a").text = "1"
        assert serialize_xml(root).endswith("<req><a>1</a></req>")

    def test_element_tree(self):
        tree = ET.ElementTree(ET.fromstring("<req><a>1</a></req>"))
        assert serialize_xml(tree).endswith("<req><a>1</a></req>")

    def test_string_passthrough(self):
        assert serialize_xml("<raw/>") == "<raw/>"
        assert serialize_xml(b"<raw/>") == b"<raw/>"

    def test_mapping(self):
        assert serialize_xml({"a": "1"}).endswith("<xml><a>1</a></xml>")
