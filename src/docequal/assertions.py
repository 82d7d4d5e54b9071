"""
Assertion surface: raw text in, pass or one ComparisonMismatch out.

Pipeline of every call:
    options.validate() → load expected → load actual → compare → render

Usage:
    assert_json_equal('{"a": 1, "b": 2}', '{"b": 2, "a": 1}')
    assert_csv_equal(expected_csv, actual_csv, CompareOptions().ignore_column("id"))
"""

import logging

from docequal.compare.engine import ComparisonResult, compare
from docequal.compare.report import render_report
from docequal.domain.errors import ComparisonMismatch, ErrorCodes, InvalidOptionsError
from docequal.domain.model import Object, Value
from docequal.domain.options import CompareOptions, Format, resolve_options
from docequal.parsers import load_csv, load_json, load_xml

logger = logging.getLogger(__name__)


def load_document(text: str, fmt: Format, options: CompareOptions, label: str | None = None) -> Value:
    """Load raw text with the parser of its format."""
    fmt = Format(fmt)
    label = label or fmt.value.upper()
    if fmt is Format.XML:
        return load_xml(text, label)
    if fmt is Format.JSON:
        return load_json(text, label)
    return load_csv(text, options, label)


def _check_root_not_ignored(document: Value, options: CompareOptions) -> None:
    if not isinstance(document, Object):
        return
    for name in document.keys():
        if name in options.ignored_nodes:
            raise InvalidOptionsError(
                ErrorCodes.CONFLICTING_OPTIONS,
                f"Cannot ignore the XML document element '{name}'",
                option="ignore_node",
                value=name,
            )


def compare_documents(
    expected: str,
    actual: str,
    fmt: Format,
    options: CompareOptions | None = None,
    expected_label: str | None = None,
    actual_label: str | None = None,
) -> tuple[Value, Value, ComparisonResult]:
    """
    Parse both documents and compare them.

    Returns:
        (expected value, actual value, result)

    Raises:
        InvalidOptionsError: On invalid options
        MalformedInputError: When either document does not parse
    """
    fmt = Format(fmt)
    options = resolve_options(options)

    expected_value = load_document(expected, fmt, options, expected_label or f"expected {fmt.value.upper()}")
    actual_value = load_document(actual, fmt, options, actual_label or f"actual {fmt.value.upper()}")

    if fmt is Format.XML:
        _check_root_not_ignored(expected_value, options)
        _check_root_not_ignored(actual_value, options)

    return expected_value, actual_value, compare(expected_value, actual_value, options)


def assert_documents_equal(
    expected: str,
    actual: str,
    fmt: Format,
    options: CompareOptions | None = None,
    method_name: str = "assert_equal",
    expected_label: str | None = None,
    actual_label: str | None = None,
) -> None:
    """
    Raise one ComparisonMismatch with the rendered report when documents differ.

    Args:
        expected: Raw expected contents
        actual: Raw actual contents
        fmt: Format of both documents
        options: Comparison options (default options when None)
        method_name: Name written on the report's first line
        expected_label: Format name of the expected document in the report
        actual_label: Format name of the actual document in the report
    """
    fmt = Format(fmt)
    options = resolve_options(options)
    logger.debug(f"{method_name}: comparing {fmt.value} documents")
    expected_value, actual_value, result = compare_documents(expected, actual, fmt, options)
    if result.is_equal:
        return

    report = render_report(
        result.mismatch,
        expected_value,
        actual_value,
        fmt,
        options,
        method_name,
        expected_label=expected_label,
        actual_label=actual_label,
    )
    raise ComparisonMismatch(result.mismatch, report)


# =============================================================================
# Public API
# =============================================================================

def assert_xml_equal(expected: str, actual: str, options: CompareOptions | None = None) -> None:
    assert_documents_equal(expected, actual, Format.XML, options, "assert_xml_equal")


def assert_json_equal(expected: str, actual: str, options: CompareOptions | None = None) -> None:
    assert_documents_equal(expected, actual, Format.JSON, options, "assert_json_equal")


def assert_csv_equal(expected: str, actual: str, options: CompareOptions | None = None) -> None:
    assert_documents_equal(expected, actual, Format.CSV, options, "assert_csv_equal")


def assert_equal(expected: str, actual: str, fmt: Format, options: CompareOptions | None = None) -> None:
    """Format-dispatching assertion."""
    assert_documents_equal(expected, actual, fmt, options, "assert_equal")


def compare_xml(expected: str, actual: str, options: CompareOptions | None = None) -> ComparisonResult:
    return compare_documents(expected, actual, Format.XML, options)[2]


def compare_json(expected: str, actual: str, options: CompareOptions | None = None) -> ComparisonResult:
    return compare_documents(expected, actual, Format.JSON, options)[2]


def compare_csv(expected: str, actual: str, options: CompareOptions | None = None) -> ComparisonResult:
    return compare_documents(expected, actual, Format.CSV, options)[2]
