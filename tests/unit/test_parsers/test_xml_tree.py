"""
test_xml_tree.py - XML loading

Test cases:
- Element/attribute/text conversion rules
- Repeated siblings become arrays
- Namespaces, comments and processing instructions
- Malformed documents and mixed content
"""

import pytest

from docequal import MalformedInputError, load_xml
from docequal.domain.errors import ErrorCodes
from docequal.domain.model import Array, Object, Scalar


def entry(document: Object, *names: str):
    """Walk entry names from the document root."""
    value = document
    for name in names:
        value = value.get(name)
    return value


# =============================================================================
# Conversion
# =============================================================================

class TestConversion:
    """Element to canonical value conversion."""

    def test_root_wrapped_by_name(self):
        """The document element is the single root entry."""
        document = load_xml("<root><a>1</a></root>")
        assert document.keys() == ["root"]
        assert entry(document, "root", "a") == Scalar("1")

    def test_leaf_text_trimmed(self):
        """Leaf text is trimmed."""
        document = load_xml("<root>\n   hello  \n</root>")
        assert entry(document, "root") == Scalar("hello")

    def test_empty_element_is_empty_text(self):
        """<a/> is an empty scalar."""
        assert entry(load_xml("<root><a/></root>"), "root", "a") == Scalar("")

    def test_attributes_become_entries(self, order_xml):
        """Attributes are entries listed in `attributes`."""
        order = entry(load_xml(order_xml), "order")
        assert order.get("id") == Scalar("42")
        assert order.attributes == frozenset({"id"})

    def test_repeated_children_become_array(self, order_xml):
        """Repeated sibling names become one array in document order."""
        lines = entry(load_xml(order_xml), "order", "line")
        assert isinstance(lines, Array)
        assert [item.get("sku") for item in lines.items] == [Scalar("A1"), Scalar("B7")]

    def test_attribute_with_text(self):
        """Text next to attributes is kept under #text."""
        weight = entry(load_xml('<root><w unit="kg">5</w></root>'), "root", "w")
        assert weight.get("unit") == Scalar("kg")
        assert weight.get("#text") == Scalar("5")

    def test_attribute_colliding_with_child(self):
        """An attribute named like a child element is prefixed with @."""
        item = entry(load_xml('<root name="x"><name>y</name></root>'), "root")
        assert item.get("@name") == Scalar("x")
        assert item.get("name") == Scalar("y")
        assert item.attributes == frozenset({"@name"})

    def test_namespaces_stripped(self):
        """Prefixes and namespace URIs do not reach the model."""
        document = load_xml('<x:root xmlns:x="urn:x"><x:a y:id="1" xmlns:y="urn:y">v</x:a></x:root>')
        a = entry(document, "root", "a")
        assert a.get("id") == Scalar("1")
        assert a.get("#text") == Scalar("v")

    def test_comments_and_pis_dropped(self):
        """Comments and processing instructions are ignored."""
        document = load_xml("<root><!-- note --><?pi data?><a>1</a></root>")
        assert entry(document, "root").keys() == ["a"]

    def test_encoding_declaration_accepted(self):
        """Documents with an XML declaration load from text."""
        document = load_xml('<?xml version="1.0" encoding="UTF-8"?><root>é</root>')
        assert entry(document, "root") == Scalar("é")


# =============================================================================
# Errors
# =============================================================================

class TestErrors:
    """Malformed input."""

    def test_not_well_formed(self):
        """Unclosed elements raise MalformedInputError with a position."""
        with pytest.raises(MalformedInputError) as exc_info:
            load_xml("<root>\n<a></root>")
        assert exc_info.value.code == ErrorCodes.MALFORMED_XML
        assert exc_info.value.context["line"] >= 1

    @pytest.mark.parametrize("text", ["", "   \n"])
    def test_blank_input(self, text):
        """Blank contents are rejected."""
        with pytest.raises(MalformedInputError) as exc_info:
            load_xml(text)
        assert exc_info.value.code == ErrorCodes.EMPTY_INPUT

    def test_mixed_content_rejected(self):
        """Text interleaved with child elements is not supported."""
        with pytest.raises(MalformedInputError) as exc_info:
            load_xml("<root>text<a>1</a>more</root>")
        assert exc_info.value.code == ErrorCodes.MIXED_XML_CONTENT
        assert exc_info.value.context["path"] == "/root"

    def test_label_in_message(self):
        """The document label appears in the message."""
        with pytest.raises(MalformedInputError, match="actual XML"):
            load_xml("<root>", label="actual XML")
