"""
Failure reports for mismatches.

Provides human-readable diff output for failed document assertions:

    assert_json_equal failure: expected JSON and actual JSON contents do not match at /tree/leaves
    actual has a different value at /tree/leaves, expected 5 while actual 10

    Options:
    	- ignored node names: []
    	- array order: include

    Expected:
    {...}

    Actual:
    {...}

Rendering never re-parses: it works on the canonical values and the paths
recorded in the mismatch.
"""

import json
import re
from itertools import zip_longest

from lxml import etree

from docequal.domain.constants import (
    ROOT_PATH,
    TRIMMED_MARKER,
    XML_ATTRIBUTE_PREFIX,
    XML_TEXT_ENTRY,
)
from docequal.domain.model import Array, Object, Row, Scalar, ScalarKind, Table, Value
from docequal.domain.options import CompareOptions, Format, ReportFormat, ReportScope
from docequal.parsers.csv_table import render_csv, render_line

from .engine import Mismatch

_INDEX_SUFFIX = re.compile(r"(\[\d+\])+$")


def trim(text: str, max_characters: int) -> str:
    """Cut text to the character limit with an explicit marker."""
    if len(text) > max_characters:
        return text[:max_characters] + TRIMMED_MARKER
    return text


class ReportBuilder:
    """
    Build a failure report line by line.

    Usage:
        report = (ReportBuilder.for_method("assert_xml_equal", "documents do not match")
                  .append_line(str(mismatch))
                  .append_diff(expected_xml, actual_xml, max_characters=500)
                  .build())
    """

    def __init__(self, method_name: str, general_message: str):
        if not method_name.strip():
            raise ValueError("Requires a non-blank method name for the failure report")
        if not general_message.strip():
            raise ValueError("Requires a non-blank general message for the failure report")

        self._lines = [f"{method_name} failure: {general_message}"]

    @classmethod
    def for_method(cls, method_name: str, general_message: str) -> "ReportBuilder":
        return cls(method_name, general_message)

    def append_line(self, message: str = "", max_characters: int = 1000) -> "ReportBuilder":
        self._lines.append(trim(message, max_characters))
        return self

    def append_diff(
        self,
        expected: str,
        actual: str,
        max_characters: int,
        report_format: ReportFormat = ReportFormat.VERTICAL,
    ) -> "ReportBuilder":
        """Append the expected and actual blocks; a zero limit omits them."""
        if max_characters <= 0:
            return self

        expected = trim(expected, max_characters)
        actual = trim(actual, max_characters)

        if report_format is ReportFormat.HORIZONTAL:
            self._lines.append("")
            self._lines.extend(_side_by_side(expected, actual))
        else:
            self._lines.extend(["", "Expected:", expected, "", "Actual:", actual])
        return self

    def build(self) -> str:
        return "\n".join(self._lines)

    def __str__(self) -> str:
        return self.build()


def _side_by_side(expected: str, actual: str) -> list[str]:
    left = ["Expected:", *expected.splitlines()]
    right = ["Actual:", *actual.splitlines()]
    width = max(len(line) for line in left)
    return [
        f"{left_line.ljust(width)} | {right_line}".rstrip()
        for left_line, right_line in zip_longest(left, right, fillvalue="")
    ]


# =============================================================================
# Value rendering
# =============================================================================

def _element_name(path: str) -> str | None:
    """Local name of the element at a path: `/root/Item[2]` → `Item`."""
    if path == ROOT_PATH:
        return None
    return _INDEX_SUFFIX.sub("", path.rsplit("/", 1)[-1]) or None


def _build_xml(parent: etree._Element | None, name: str, value: Value) -> list[etree._Element]:
    if isinstance(value, Array):
        elements = []
        for item in value.items:
            elements.extend(_build_xml(parent, name, item))
        return elements

    element = etree.Element(name) if parent is None else etree.SubElement(parent, name)

    if isinstance(value, Scalar):
        element.text = value.text
        return [element]

    if isinstance(value, Object):
        for key, child in value.entries:
            if key in value.attributes and isinstance(child, Scalar):
                element.set(key.removeprefix(XML_ATTRIBUTE_PREFIX), child.text)
            elif key == XML_TEXT_ENTRY and isinstance(child, Scalar):
                element.text = child.text
            else:
                _build_xml(element, key, child)
    return [element]


def render_xml(value: Value, name: str | None = None) -> str:
    """Render a canonical value as indented XML."""
    if name is None:
        if isinstance(value, Object):
            parts = []
            for key, child in value.entries:
                parts.append(render_xml(child, key))
            return "\n".join(parts)
        return value.text if isinstance(value, Scalar) else ""

    elements = _build_xml(None, name, value)
    return "\n".join(
        etree.tostring(element, pretty_print=True, encoding="unicode").rstrip()
        for element in elements
    )


def render_json(value: Value, depth: int = 0) -> str:
    """Render a canonical value as indented JSON, keeping number literals."""
    pad = "  " * depth
    inner = "  " * (depth + 1)

    if isinstance(value, Scalar):
        if value.kind in (ScalarKind.NUMBER, ScalarKind.BOOLEAN, ScalarKind.NULL):
            return value.text
        return json.dumps(value.text, ensure_ascii=False)

    if isinstance(value, Object):
        if not value.entries:
            return "{}"
        lines = [
            f"{inner}{json.dumps(key, ensure_ascii=False)}: {render_json(child, depth + 1)}"
            for key, child in value.entries
        ]
        return "{\n" + ",\n".join(lines) + f"\n{pad}}}"

    if isinstance(value, Array):
        if not value.items:
            return "[]"
        lines = [f"{inner}{render_json(item, depth + 1)}" for item in value.items]
        return "[\n" + ",\n".join(lines) + f"\n{pad}]"

    return ""


def _render_rows(table: Table, row_number: int | None, options: CompareOptions) -> str:
    """Header plus one row, or the whole table when no row is selected."""
    if row_number is None:
        return render_csv(table, options)

    rows: list[Row] = [row for row in table.rows if row.number == row_number]
    lines = [render_line(table.header, options)] if table.header is not None else []
    lines.extend(render_line(row.cells, options) for row in rows)
    return options.newline.join(lines)


def render_value(value: Value, fmt: Format, options: CompareOptions, name: str | None = None) -> str:
    """Render any canonical value in the notation of its format."""
    if isinstance(value, Table):
        return render_csv(value, options)
    if fmt is Format.XML:
        return render_xml(value, name)
    return render_json(value)


def _document_blocks(
    mismatch: Mismatch,
    expected: Value,
    actual: Value,
    fmt: Format,
    options: CompareOptions,
) -> tuple[str, str]:
    if options.report_scope is ReportScope.COMPLETE:
        return render_value(expected, fmt, options), render_value(actual, fmt, options)

    if fmt is Format.CSV and isinstance(expected, Table) and isinstance(actual, Table):
        return (
            _render_rows(expected, mismatch.expected_row, options),
            _render_rows(actual, mismatch.actual_row, options),
        )

    name = _element_name(mismatch.context_path)
    expected_node = mismatch.expected_node if mismatch.expected_node is not None else expected
    actual_node = mismatch.actual_node if mismatch.actual_node is not None else actual
    return (
        render_value(expected_node, fmt, options, name),
        render_value(actual_node, fmt, options, name),
    )


def render_report(
    mismatch: Mismatch,
    expected: Value,
    actual: Value,
    fmt: Format,
    options: CompareOptions,
    method_name: str,
    expected_label: str | None = None,
    actual_label: str | None = None,
) -> str:
    """
    Format a mismatch into a human-readable report.

    Args:
        mismatch: First mismatch found by the engine
        expected: Whole expected canonical value
        actual: Whole actual canonical value
        fmt: Format of both documents
        options: Options used for the comparison (scope, layout, character limit)
        method_name: Name of the failing assertion
        expected_label: Name of the expected document format (default: format)
        actual_label: Name of the actual document format (default: format)

    Returns:
        Formatted report string
    """
    expected_label = expected_label or fmt.value.upper()
    actual_label = actual_label or fmt.value.upper()

    expected_block, actual_block = _document_blocks(mismatch, expected, actual, fmt, options)

    builder = ReportBuilder.for_method(
        method_name,
        f"expected {expected_label} and actual {actual_label} contents do not match at {mismatch.path}",
    )
    builder.append_line(f"{mismatch.kind.value}: {mismatch}")
    if mismatch.key is not None and mismatch.kind.value.endswith("Key"):
        builder.append_line(f"key: {mismatch.key}")
    if mismatch.expected_count is not None:
        builder.append_line(f"counts: expected {mismatch.expected_count}, actual {mismatch.actual_count}")
    builder.append_line()
    builder.append_line(options.describe(fmt))
    builder.append_diff(
        expected_block,
        actual_block,
        options.max_input_characters,
        options.layout_for(fmt),
    )
    return builder.build()
