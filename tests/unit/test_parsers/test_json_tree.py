"""
test_json_tree.py - JSON loading
"""

import pytest

from docequal import MalformedInputError, load_json
from docequal.domain.errors import ErrorCodes
from docequal.domain.model import Array, Object, Scalar, ScalarKind


class TestConversion:
    """JSON to canonical value."""

    def test_typed_scalars(self, order_json):
        """Each JSON scalar keeps its kind."""
        document = load_json(order_json)
        assert document.get("id") == Scalar("42", ScalarKind.NUMBER)
        assert document.get("customer") == Scalar("ACME", ScalarKind.STRING)
        assert document.get("paid") == Scalar("true", ScalarKind.BOOLEAN)
        assert document.get("note") == Scalar("null", ScalarKind.NULL)

    def test_number_literal_preserved(self):
        """1.0 and 1e3 keep their literal text."""
        document = load_json('[1.0, 1e3, -0]')
        assert [item.text for item in document.items] == ["1.0", "1e3", "-0"]

    def test_nested_structures(self, order_json):
        """Arrays of objects are converted recursively."""
        lines = load_json(order_json).get("lines")
        assert isinstance(lines, Array)
        assert isinstance(lines.items[0], Object)
        assert lines.items[1].get("qty") == Scalar("1", ScalarKind.NUMBER)

    def test_root_scalar(self):
        """A bare scalar is a valid document."""
        assert load_json('"x"') == Scalar("x", ScalarKind.STRING)

    def test_key_order_kept(self):
        """Entry order follows the source."""
        assert load_json('{"b": 1, "a": 2}').keys() == ["b", "a"]


class TestErrors:
    """Malformed JSON."""

    def test_syntax_error_has_position(self):
        """Decode errors carry line and column."""
        with pytest.raises(MalformedInputError) as exc_info:
            load_json('{\n  "a": }')
        error = exc_info.value
        assert error.code == ErrorCodes.MALFORMED_JSON
        assert error.context["line"] == 2

    def test_duplicate_key(self):
        """Duplicate keys in one object are rejected."""
        with pytest.raises(MalformedInputError) as exc_info:
            load_json('{"a": 1, "a": 2}')
        assert exc_info.value.code == ErrorCodes.DUPLICATE_JSON_KEY
        assert exc_info.value.context["key"] == "a"

    def test_same_key_in_different_objects_allowed(self):
        """Uniqueness is per object."""
        load_json('[{"a": 1}, {"a": 2}]')

    @pytest.mark.parametrize("text", ["NaN", "[Infinity]", '{"a": -Infinity}'])
    def test_non_finite_constants_rejected(self, text):
        """NaN and Infinity are not JSON."""
        with pytest.raises(MalformedInputError):
            load_json(text)

    def test_blank(self):
        """Blank input is rejected."""
        with pytest.raises(MalformedInputError) as exc_info:
            load_json("  ")
        assert exc_info.value.code == ErrorCodes.EMPTY_INPUT

    def test_trailing_data(self):
        """Extra data after the document is an error."""
        with pytest.raises(MalformedInputError):
            load_json('{"a": 1} {"b": 2}')
