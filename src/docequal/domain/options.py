"""
Comparison options.

One options object covers all three formats; the CSV fields are parse-time
settings bundled here so a caller configures a comparison in one place.

Usage:
    options = CompareOptions().ignore_node("timestamp").ignore_node("id")
    options = CompareOptions(separator=";", header=CsvHeader.MISSING)
"""

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from .constants import (
    DEFAULT_CSV_ESCAPE,
    DEFAULT_CSV_NEWLINE,
    DEFAULT_CSV_QUOTE,
    DEFAULT_CSV_SEPARATOR,
    DEFAULT_MAX_INPUT_CHARACTERS,
    XML_ATTRIBUTE_PREFIX,
)
from .errors import ErrorCodes, InvalidOptionsError


class Format(str, Enum):
    """Supported document formats."""
    XML = "xml"
    JSON = "json"
    CSV = "csv"


class Order(str, Enum):
    """Whether element order (arrays, CSV rows) participates in comparison."""
    INCLUDE = "include"
    IGNORE = "ignore"


class CsvHeader(str, Enum):
    """Whether the first CSV line holds the column names."""
    PRESENT = "present"
    MISSING = "missing"


class ReportScope(str, Enum):
    """Which part of the documents a failure report shows."""
    LIMITED = "limited"     # sub-documents at the mismatch
    COMPLETE = "complete"   # whole documents


class ReportFormat(str, Enum):
    """Layout of the expected/actual blocks in a failure report."""
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


# Array index segment of a path: /items[2], /[0]
_INDEX_SEGMENT = re.compile(r"\[\d+\]")


def _coerce_enum(enum_type: type[Enum], value: Any, option: str) -> Any:
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(str(value).lower())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise InvalidOptionsError(
            ErrorCodes.INVALID_OPTION,
            f"Option '{option}' must be one of [{allowed}], got {value!r}",
            option=option,
            value=value,
        ) from None


@dataclass
class CompareOptions:
    """
    Options for parsing and comparing documents.

    Args:
        ignored_nodes: XML/JSON local names skipped at any depth
        ignored_columns: CSV header names skipped
        ignored_column_indexes: CSV 0-based column indexes skipped
        ignored_paths: exact locations skipped (e.g. "/root/items[1]")
        order: array element order policy
        row_order: CSV row order policy
        column_order: CSV column order policy (ignore pairs columns by header name)
        normalize_numbers: compare decimal-looking scalars by value (1.0 == 1)
        max_input_characters: character limit of each document block in reports
        report_scope: limited (mismatch only) or complete documents
        report_format: vertical or horizontal layout (None: horizontal for XML, vertical otherwise)
        separator: CSV field separator
        newline: CSV row separator token
        header: CSV header presence
        quote: CSV quote character
        escape: CSV escape character (escapes quotes and separators)
    """
    ignored_nodes: list[str] = field(default_factory=list)
    ignored_columns: list[str] = field(default_factory=list)
    ignored_column_indexes: list[int] = field(default_factory=list)
    ignored_paths: list[str] = field(default_factory=list)
    order: Order = Order.INCLUDE
    row_order: Order = Order.INCLUDE
    column_order: Order = Order.IGNORE
    normalize_numbers: bool = False
    max_input_characters: int = DEFAULT_MAX_INPUT_CHARACTERS
    report_scope: ReportScope = ReportScope.LIMITED
    report_format: ReportFormat | None = None
    separator: str = DEFAULT_CSV_SEPARATOR
    newline: str = DEFAULT_CSV_NEWLINE
    header: CsvHeader = CsvHeader.PRESENT
    quote: str = DEFAULT_CSV_QUOTE
    escape: str = DEFAULT_CSV_ESCAPE

    # =========================================================================
    # Ignore set
    # =========================================================================

    def ignore_node(self, name: str) -> "CompareOptions":
        """Skip every XML element/attribute or JSON property with this local name."""
        if not isinstance(name, str) or not name.strip():
            raise InvalidOptionsError(
                ErrorCodes.INVALID_OPTION,
                f"Requires a non-blank node name to ignore, got {name!r}",
                option="ignore_node",
            )
        if name not in self.ignored_nodes:
            self.ignored_nodes.append(name)
        return self

    def ignore_column(self, column: str | int) -> "CompareOptions":
        """Skip a CSV column by header name or by 0-based index."""
        if isinstance(column, bool):
            raise InvalidOptionsError(
                ErrorCodes.INVALID_OPTION,
                f"Requires a column name or index to ignore, got {column!r}",
                option="ignore_column",
            )
        if isinstance(column, int):
            if column < 0:
                raise InvalidOptionsError(
                    ErrorCodes.INVALID_OPTION,
                    f"Column index to ignore cannot be negative, got {column}",
                    option="ignore_column",
                )
            if column not in self.ignored_column_indexes:
                self.ignored_column_indexes.append(column)
            return self

        if not isinstance(column, str) or not column.strip():
            raise InvalidOptionsError(
                ErrorCodes.INVALID_OPTION,
                f"Requires a non-blank column name to ignore, got {column!r}",
                option="ignore_column",
            )
        if column not in self.ignored_columns:
            self.ignored_columns.append(column)
        return self

    def ignore_path(self, path: str) -> "CompareOptions":
        """Skip exactly one location, e.g. "/order/lines[2]/price"."""
        if not isinstance(path, str) or not path.startswith("/"):
            raise InvalidOptionsError(
                ErrorCodes.INVALID_OPTION,
                f"Ignored paths must start with '/', got {path!r}",
                option="ignore_path",
            )
        if path not in self.ignored_paths:
            self.ignored_paths.append(path)
        return self

    def is_name_ignored(self, name: str) -> bool:
        """Local name match; an `@id` attribute key is named `id`."""
        return name.removeprefix(XML_ATTRIBUTE_PREFIX) in self.ignored_nodes

    def is_node_ignored(self, name: str | None, path: str) -> bool:
        if name is not None and self.is_name_ignored(name):
            return True
        return path in self.ignored_paths

    def is_column_ignored(self, name: str | None, index: int) -> bool:
        if name is not None and name in self.ignored_columns:
            return True
        return index in self.ignored_column_indexes

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self) -> "CompareOptions":
        """
        Check every option, coercing enum values given as strings.

        Returns:
            self, for chaining

        Raises:
            InvalidOptionsError: on any out-of-range or conflicting value
        """
        self.order = _coerce_enum(Order, self.order, "order")
        self.row_order = _coerce_enum(Order, self.row_order, "row_order")
        self.column_order = _coerce_enum(Order, self.column_order, "column_order")
        self.header = _coerce_enum(CsvHeader, self.header, "header")
        self.report_scope = _coerce_enum(ReportScope, self.report_scope, "report_scope")
        if self.report_format is not None:
            self.report_format = _coerce_enum(ReportFormat, self.report_format, "report_format")

        if not isinstance(self.normalize_numbers, bool):
            raise InvalidOptionsError(
                ErrorCodes.INVALID_OPTION,
                f"Option 'normalize_numbers' must be a boolean, got {self.normalize_numbers!r}",
                option="normalize_numbers",
            )

        if (
            isinstance(self.max_input_characters, bool)
            or not isinstance(self.max_input_characters, int)
            or self.max_input_characters < 0
        ):
            raise InvalidOptionsError(
                ErrorCodes.INVALID_OPTION,
                f"Maximum input characters must be a non-negative integer, got {self.max_input_characters!r}",
                option="max_input_characters",
            )

        for option in ("separator", "quote", "escape"):
            value = getattr(self, option)
            if not isinstance(value, str) or len(value) != 1:
                raise InvalidOptionsError(
                    ErrorCodes.INVALID_OPTION,
                    f"CSV option '{option}' must be a single character, got {value!r}",
                    option=option,
                )

        if not isinstance(self.newline, str) or not self.newline:
            raise InvalidOptionsError(
                ErrorCodes.INVALID_OPTION,
                f"CSV newline must be a non-empty string, got {self.newline!r}",
                option="newline",
            )

        special = {"separator": self.separator, "quote": self.quote, "escape": self.escape}
        if len(set(special.values())) != len(special):
            raise InvalidOptionsError(
                ErrorCodes.CONFLICTING_OPTIONS,
                f"CSV separator, quote and escape must be distinct characters, got {special}",
                **special,
            )
        if any(char in self.newline for char in special.values()):
            raise InvalidOptionsError(
                ErrorCodes.CONFLICTING_OPTIONS,
                f"CSV newline {self.newline!r} cannot contain the separator, quote or escape character",
                newline=self.newline,
            )

        if self.header is CsvHeader.MISSING and self.ignored_columns:
            raise InvalidOptionsError(
                ErrorCodes.CONFLICTING_OPTIONS,
                "Columns can only be ignored by name when the CSV header is present, "
                f"ignore them by index instead: {self.ignored_columns}",
                ignored_columns=list(self.ignored_columns),
            )
        if (
            self.header is CsvHeader.PRESENT
            and self.column_order is Order.IGNORE
            and self.ignored_column_indexes
        ):
            raise InvalidOptionsError(
                ErrorCodes.CONFLICTING_OPTIONS,
                "Columns paired by header name cannot be ignored by index, "
                f"set column_order to include or ignore them by name: {self.ignored_column_indexes}",
                ignored_column_indexes=list(self.ignored_column_indexes),
            )

        # Sorted arrays have no stable index to match an ignored path against
        indexed = [path for path in self.ignored_paths if _INDEX_SEGMENT.search(path)]
        if self.order is Order.IGNORE and indexed:
            raise InvalidOptionsError(
                ErrorCodes.CONFLICTING_OPTIONS,
                "Paths through array items cannot be ignored when array order is ignored, "
                f"ignore the node by name instead: {indexed}",
                ignored_paths=indexed,
            )

        return self

    def copy(self) -> "CompareOptions":
        return replace(
            self,
            ignored_nodes=list(self.ignored_nodes),
            ignored_columns=list(self.ignored_columns),
            ignored_column_indexes=list(self.ignored_column_indexes),
            ignored_paths=list(self.ignored_paths),
        )

    # =========================================================================
    # Report
    # =========================================================================

    def layout_for(self, fmt: Format) -> ReportFormat:
        """Report layout, defaulting to side by side for XML only."""
        if self.report_format is not None:
            return self.report_format
        return ReportFormat.HORIZONTAL if fmt is Format.XML else ReportFormat.VERTICAL

    def describe(self, fmt: Format) -> str:
        """Options block written to failure reports."""
        lines = ["Options:"]
        if fmt is Format.CSV:
            lines.append(f"\t- ignored columns: [{', '.join(self.ignored_columns)}]")
            lines.append(
                f"\t- ignored column indexes: [{', '.join(str(i) for i in self.ignored_column_indexes)}]"
            )
            lines.append(f"\t- header: {self.header.value}")
            lines.append(f"\t- row order: {self.row_order.value}")
            lines.append(f"\t- column order: {self.column_order.value}")
            lines.append(f"\t- separator: {self.separator!r}")
        else:
            lines.append(f"\t- ignored node names: [{', '.join(self.ignored_nodes)}]")
            lines.append(f"\t- array order: {self.order.value}")
        if self.ignored_paths:
            lines.append(f"\t- ignored paths: [{', '.join(self.ignored_paths)}]")
        if self.normalize_numbers:
            lines.append("\t- numbers compared by value")
        return "\n".join(lines)


def resolve_options(options: CompareOptions | None) -> CompareOptions:
    """Default options when none given, validated either way."""
    return (options or CompareOptions()).validate()
