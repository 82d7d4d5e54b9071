"""
docequal: structural equality and diff reports for XML, JSON and CSV.

Usage:
    from docequal import CompareOptions, assert_json_equal

    assert_json_equal(expected, actual, CompareOptions().ignore_node("id"))
"""

from .assertions import (
    assert_csv_equal,
    assert_equal,
    assert_json_equal,
    assert_xml_equal,
    compare_csv,
    compare_json,
    compare_xml,
)
from .compare import ComparisonResult, Mismatch, MismatchKind, compare, find_differences
from .core import load_options, options_from_mapping
from .domain import (
    ComparisonMismatch,
    CompareOptions,
    CsvHeader,
    DocEqualError,
    ErrorCodes,
    Format,
    InvalidOptionsError,
    MalformedInputError,
    Order,
    ReportFormat,
    ReportScope,
    TransformExecutionError,
)
from .parsers import load_csv, load_json, load_xml, render_csv
from .transform import (
    TransformExecutor,
    XsltTransformExecutor,
    assert_transform_equal,
    transform_xml_to_csv,
    transform_xml_to_json,
    transform_xml_to_xml,
)

__version__ = "0.1.0"

__all__ = [
    # assertions
    "assert_xml_equal",
    "assert_json_equal",
    "assert_csv_equal",
    "assert_equal",
    "compare_xml",
    "compare_json",
    "compare_csv",
    # engine
    "compare",
    "find_differences",
    "ComparisonResult",
    "Mismatch",
    "MismatchKind",
    # parsers
    "load_xml",
    "load_json",
    "load_csv",
    "render_csv",
    # transform
    "TransformExecutor",
    "XsltTransformExecutor",
    "transform_xml_to_xml",
    "transform_xml_to_json",
    "transform_xml_to_csv",
    "assert_transform_equal",
    # options
    "CompareOptions",
    "Format",
    "Order",
    "CsvHeader",
    "ReportScope",
    "ReportFormat",
    "load_options",
    "options_from_mapping",
    # errors
    "DocEqualError",
    "MalformedInputError",
    "TransformExecutionError",
    "InvalidOptionsError",
    "ComparisonMismatch",
    "ErrorCodes",
]
