"""Domain layer: errors, canonical model and options."""

from .errors import (
    ComparisonMismatch,
    DocEqualError,
    ErrorCodes,
    InvalidOptionsError,
    MalformedInputError,
    TransformExecutionError,
)
from .model import Array, Object, Row, Scalar, ScalarKind, Table, Value
from .options import (
    CompareOptions,
    CsvHeader,
    Format,
    Order,
    ReportFormat,
    ReportScope,
)

__all__ = [
    # errors
    "DocEqualError",
    "MalformedInputError",
    "TransformExecutionError",
    "InvalidOptionsError",
    "ComparisonMismatch",
    "ErrorCodes",
    # model
    "Scalar",
    "ScalarKind",
    "Object",
    "Array",
    "Row",
    "Table",
    "Value",
    # options
    "CompareOptions",
    "Format",
    "Order",
    "CsvHeader",
    "ReportScope",
    "ReportFormat",
]
