"""
test_assertions.py - public assertion surface

Test cases:
- Scenario 1: JSON key order insensitivity
- Scenario 2: renamed JSON root key
- Scenario 3: ignored XML node
- Scenario 4: CSV cell difference
- Scenario 5: CSV invalid row
- Parse and option errors raised before comparing
"""

import pytest

from docequal import (
    ComparisonMismatch,
    CompareOptions,
    CsvHeader,
    Format,
    InvalidOptionsError,
    MalformedInputError,
    MismatchKind,
    assert_csv_equal,
    assert_equal,
    assert_json_equal,
    assert_xml_equal,
    compare_csv,
    compare_json,
    compare_xml,
)
from docequal.domain.errors import ErrorCodes

# =============================================================================
# Scenarios
# =============================================================================

class TestScenarios:
    """End-to-end assertion scenarios."""

    def test_json_key_order(self):
        """Scenario 1: same entries in another order pass."""
        assert_json_equal('{"a": 1, "b": 2}', '{"b": 2, "a": 1}')

    def test_json_renamed_root_key(self):
        """Scenario 2: a renamed key is reported as missing first."""
        with pytest.raises(ComparisonMismatch) as exc_info:
            assert_json_equal('{"root": 1}', '{"diff-root": 1}')
        assert exc_info.value.kind is MismatchKind.MISSING_KEY
        assert exc_info.value.path == "/root"

    def test_xml_ignored_node(self):
        """Scenario 3: differences in an ignored node pass."""
        expected = "<root><Node1>1</Node1><Node2>same</Node2></root>"
        actual = "<root><Node1>2</Node1><Node2>same</Node2></root>"
        with pytest.raises(ComparisonMismatch) as exc_info:
            assert_xml_equal(expected, actual)
        assert exc_info.value.path == "/root/Node1"

        assert_xml_equal(expected, actual, CompareOptions().ignore_node("Node1"))

    def test_csv_cell(self):
        """Scenario 4: one different cell."""
        with pytest.raises(ComparisonMismatch) as exc_info:
            assert_csv_equal("a,b\n1,2\n", "a,b\n1,3\n")
        mismatch = exc_info.value.mismatch
        assert mismatch.kind is MismatchKind.VALUE_MISMATCH
        assert mismatch.path == 'row 1, column "b"'
        assert (mismatch.expected_description, mismatch.actual_description) == ("2", "3")

    def test_csv_invalid_row(self):
        """Scenario 5: a row wider than the header."""
        with pytest.raises(ComparisonMismatch) as exc_info:
            assert_csv_equal("a,b\n1,2\n", "a,b\n1,2,3\n")
        assert exc_info.value.kind is MismatchKind.INVALID_ROW
        assert exc_info.value.path == "row 1"


# =============================================================================
# Surface
# =============================================================================

class TestSurface:
    """Other entry points."""

    def test_mismatch_is_assertion_error(self):
        """pytest sees a mismatch as a failed assertion."""
        with pytest.raises(AssertionError):
            assert_json_equal("[1]", "[2]")

    def test_compare_functions_do_not_raise(self):
        """compare_* return a result."""
        assert compare_json('{"a": 1}', '{"a": 1}').is_equal
        assert not compare_xml("<r>1</r>", "<r>2</r>")
        result = compare_csv("a\n1\n", "a\n2\n")
        assert result.mismatch.path == 'row 1, column "a"'

    @pytest.mark.parametrize(
        "fmt, expected, actual",
        [
            (Format.XML, "<r><a>1</a></r>", "<r><a>2</a></r>"),
            ("json", '{"a": 1}', '{"a": 2}'),
            (Format.CSV, "a\n1\n", "a\n2\n"),
        ],
    )
    def test_assert_equal_dispatch(self, fmt, expected, actual):
        """assert_equal dispatches on the format."""
        assert_equal(expected, expected, fmt)
        with pytest.raises(ComparisonMismatch) as exc_info:
            assert_equal(expected, actual, fmt)
        assert exc_info.value.report.startswith("assert_equal failure:")

    def test_options_not_mutated(self):
        """Options can be reused across calls."""
        options = CompareOptions(order="ignore")
        assert_json_equal("[1, 2]", "[2, 1]", options)
        assert_json_equal("[1, 2]", "[2, 1]", options)


# =============================================================================
# Errors before comparison
# =============================================================================

class TestErrors:
    """Parse and option errors."""

    def test_malformed_expected(self):
        """Invalid expected document names the expected side."""
        with pytest.raises(MalformedInputError, match="expected JSON"):
            assert_json_equal("{", "{}")

    def test_malformed_actual(self):
        """Invalid actual document names the actual side."""
        with pytest.raises(MalformedInputError, match="actual XML"):
            assert_xml_equal("<r/>", "<r>")

    def test_malformed_is_not_a_mismatch(self):
        """Parse failures are never reported as mismatches."""
        with pytest.raises(MalformedInputError) as exc_info:
            assert_csv_equal('a\n"open\n', "a\n1\n")
        assert not isinstance(exc_info.value, AssertionError)

    def test_ignoring_xml_root_rejected(self):
        """The document element cannot be ignored."""
        with pytest.raises(InvalidOptionsError) as exc_info:
            assert_xml_equal("<root/>", "<root/>", CompareOptions().ignore_node("root"))
        assert exc_info.value.code == ErrorCodes.CONFLICTING_OPTIONS

    def test_invalid_options_before_parsing(self):
        """Options are validated before the documents are read."""
        options = CompareOptions(header=CsvHeader.MISSING).ignore_column("a")
        with pytest.raises(InvalidOptionsError):
            assert_csv_equal("not even parsed", "x", options)
