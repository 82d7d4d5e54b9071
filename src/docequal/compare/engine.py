"""
Comparison engine: walks two canonical values in lock-step.

The walk is depth-first and deterministic:
- Objects: missing keys (expected order), then unexpected keys (actual
  order), then shared keys recursively (expected order)
- Arrays: length first, then positional
- Tables: columns, row count, invalid rows, then cells row by row
- Different variants or scalar kinds: type mismatch, no descent

`compare` stops at the first mismatch; `find_differences` continues the
same walk, so its first element is always what `compare` reports.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from docequal.domain.constants import MAX_DESCRIPTION_CHARACTERS, ROOT_PATH
from docequal.domain.model import (
    Array,
    Object,
    Row,
    Scalar,
    ScalarKind,
    Table,
    Value,
    cell_path,
    child_path,
    describe_type,
    index_path,
    row_path,
)
from docequal.domain.options import CompareOptions, Order, resolve_options

from .normalize import ScalarNormalizer, canonical_text

logger = logging.getLogger(__name__)


class MismatchKind(str, Enum):
    """Why two documents differ."""
    TYPE_MISMATCH = "TypeMismatch"
    VALUE_MISMATCH = "ValueMismatch"
    MISSING_KEY = "MissingKey"
    UNEXPECTED_KEY = "UnexpectedKey"
    ARRAY_LENGTH_MISMATCH = "ArrayLengthMismatch"
    ROW_COUNT_MISMATCH = "RowCountMismatch"
    COLUMN_COUNT_MISMATCH = "ColumnCountMismatch"
    INVALID_ROW = "InvalidRow"


@dataclass(frozen=True)
class Mismatch:
    """
    One point where two values diverge.

    `context_path`, `expected_node` and `actual_node` locate the enclosing
    sub-documents shown in limited failure reports. For tables, the row
    numbers select the rows to show.
    """
    path: str
    kind: MismatchKind
    expected_description: str
    actual_description: str
    key: str | None = None
    expected_count: int | None = None
    actual_count: int | None = None
    context_path: str = ROOT_PATH
    expected_node: Value | None = None
    actual_node: Value | None = None
    expected_row: int | None = None
    actual_row: int | None = None

    def __str__(self) -> str:
        kind = self.kind
        if kind is MismatchKind.TYPE_MISMATCH:
            return f"actual has {self.actual_description} instead of {self.expected_description} at {self.path}"
        if kind is MismatchKind.VALUE_MISMATCH:
            return (
                f"actual has a different value at {self.path}, "
                f"expected {self.expected_description} while actual {self.actual_description}"
            )
        if kind is MismatchKind.MISSING_KEY:
            return f"actual misses '{self.key}' at {self.path}"
        if kind is MismatchKind.UNEXPECTED_KEY:
            return f"actual has unexpected '{self.key}' at {self.path}"
        if kind is MismatchKind.ARRAY_LENGTH_MISMATCH:
            return f"actual has {self.actual_count} element(s) instead of {self.expected_count} at {self.path}"
        if kind is MismatchKind.ROW_COUNT_MISMATCH:
            return f"actual has {self.actual_count} row(s) instead of {self.expected_count}"
        if kind is MismatchKind.COLUMN_COUNT_MISMATCH:
            return (
                f"actual has {self.actual_count} column(s) [{self.actual_description}] "
                f"instead of {self.expected_count} [{self.expected_description}]"
            )
        return (
            f"{self.key} has an invalid {self.path}: {self.actual_count} cell(s) "
            f"while the table has {self.expected_count} column(s)"
        )

    def to_dict(self) -> dict:
        """Machine-readable summary, without the context nodes."""
        return {
            "kind": self.kind.value,
            "path": self.path,
            "expected": self.expected_description,
            "actual": self.actual_description,
            "key": self.key,
            "expected_count": self.expected_count,
            "actual_count": self.actual_count,
        }


@dataclass(frozen=True)
class ComparisonResult:
    """Outcome of a comparison: equal, or the first mismatch."""
    mismatch: Mismatch | None = None

    @property
    def is_equal(self) -> bool:
        return self.mismatch is None

    def __bool__(self) -> bool:
        return self.is_equal

    def __str__(self) -> str:
        return "OK" if self.mismatch is None else str(self.mismatch)


def _trim(text: str) -> str:
    if len(text) > MAX_DESCRIPTION_CHARACTERS:
        return text[:MAX_DESCRIPTION_CHARACTERS] + "..."
    return text


def describe_value(value: Value | None) -> str:
    """Short description of a value for mismatch messages."""
    if value is None:
        return "nothing"
    if isinstance(value, Scalar):
        if value.kind is ScalarKind.STRING:
            return _trim(f'"{value.text}"')
        return _trim(value.text.strip())
    if isinstance(value, Object):
        return _trim(f"an object with [{', '.join(value.keys())}]")
    if isinstance(value, Array):
        return f"an array of {len(value)} element(s)"
    return f"a table of {value.row_count} row(s)"


def _describe_typed(value: Value) -> str:
    if isinstance(value, Scalar):
        return f"{describe_type(value)}: {describe_value(value)}"
    return describe_value(value)


class ComparisonEngine:
    """
    Structural comparison of canonical values under options.

    Usage:
        engine = ComparisonEngine(CompareOptions().ignore_node("id"))
        first = next(engine.walk(expected, actual), None)
    """

    def __init__(self, options: CompareOptions | None = None):
        self.options = resolve_options(options)
        self.normalizer = ScalarNormalizer(normalize_numbers=self.options.normalize_numbers)

    def walk(self, expected: Value, actual: Value) -> Iterator[Mismatch]:
        """Yield every mismatch in deterministic order."""
        yield from self._walk(expected, actual, ROOT_PATH, ROOT_PATH, expected, actual)

    # =========================================================================
    # Trees
    # =========================================================================

    def _walk(
        self,
        expected: Value,
        actual: Value,
        path: str,
        context_path: str,
        expected_context: Value,
        actual_context: Value,
    ) -> Iterator[Mismatch]:
        same_variant = type(expected) is type(actual)
        if same_variant and isinstance(expected, Scalar) and expected.kind is not actual.kind:
            same_variant = False

        if not same_variant:
            yield Mismatch(
                path=path,
                kind=MismatchKind.TYPE_MISMATCH,
                expected_description=_describe_typed(expected),
                actual_description=_describe_typed(actual),
                context_path=context_path,
                expected_node=expected_context,
                actual_node=actual_context,
            )
            return

        if isinstance(expected, Scalar):
            if not self.normalizer.equal(expected, actual):
                yield Mismatch(
                    path=path,
                    kind=MismatchKind.VALUE_MISMATCH,
                    expected_description=describe_value(expected),
                    actual_description=describe_value(actual),
                    context_path=context_path,
                    expected_node=expected_context,
                    actual_node=actual_context,
                )
        elif isinstance(expected, Object):
            yield from self._walk_object(expected, actual, path)
        elif isinstance(expected, Array):
            yield from self._walk_array(expected, actual, path)
        else:
            yield from self._walk_table(expected, actual)

    def _included_keys(self, value: Object, path: str) -> list[str]:
        return [
            key for key in value.keys()
            if not self.options.is_node_ignored(key, child_path(path, key))
        ]

    def _walk_object(self, expected: Object, actual: Object, path: str) -> Iterator[Mismatch]:
        expected_keys = self._included_keys(expected, path)
        actual_keys = self._included_keys(actual, path)
        expected_set, actual_set = set(expected_keys), set(actual_keys)

        for key in expected_keys:
            if key not in actual_set:
                yield Mismatch(
                    path=child_path(path, key),
                    kind=MismatchKind.MISSING_KEY,
                    expected_description=describe_value(expected.get(key)),
                    actual_description="nothing",
                    key=key,
                    context_path=path,
                    expected_node=expected,
                    actual_node=actual,
                )

        for key in actual_keys:
            if key not in expected_set:
                yield Mismatch(
                    path=child_path(path, key),
                    kind=MismatchKind.UNEXPECTED_KEY,
                    expected_description="nothing",
                    actual_description=describe_value(actual.get(key)),
                    key=key,
                    context_path=path,
                    expected_node=expected,
                    actual_node=actual,
                )

        for key in expected_keys:
            if key in actual_set:
                yield from self._walk(
                    expected.get(key),
                    actual.get(key),
                    child_path(path, key),
                    path,
                    expected,
                    actual,
                )

    def _walk_array(self, expected: Array, actual: Array, path: str) -> Iterator[Mismatch]:
        if len(expected) != len(actual):
            yield Mismatch(
                path=path,
                kind=MismatchKind.ARRAY_LENGTH_MISMATCH,
                expected_description=describe_value(expected),
                actual_description=describe_value(actual),
                expected_count=len(expected),
                actual_count=len(actual),
                context_path=path,
                expected_node=expected,
                actual_node=actual,
            )

        expected_items = list(expected.items)
        actual_items = list(actual.items)
        if self.options.order is Order.IGNORE:
            expected_items.sort(key=self._sort_key)
            actual_items.sort(key=self._sort_key)

        # Still compare common elements
        for index in range(min(len(expected_items), len(actual_items))):
            item_path = index_path(path, index)
            if self.options.is_node_ignored(None, item_path):
                continue
            yield from self._walk(
                expected_items[index],
                actual_items[index],
                item_path,
                path,
                expected,
                actual,
            )

    def _sort_key(self, value: Value) -> str:
        return canonical_text(value, self.options, self.normalizer)

    # =========================================================================
    # Tables
    # =========================================================================

    def _included_columns(self, table: Table) -> list[int]:
        names = table.header or ()
        return [
            index for index in range(table.width)
            if not self.options.is_column_ignored(names[index] if table.header else None, index)
        ]

    def _column_mapping(self, expected: Table, actual: Table) -> tuple[dict[int, int] | None, Mismatch | None]:
        """Pair expected column indexes with actual ones, by name, by position or by index."""
        expected_columns = self._included_columns(expected)
        actual_columns = self._included_columns(actual)

        if expected.header is None or actual.header is None:
            if expected.has_header != actual.has_header or expected.width != actual.width:
                return None, Mismatch(
                    path="header",
                    kind=MismatchKind.COLUMN_COUNT_MISMATCH,
                    expected_description=f"{expected.width} column(s)",
                    actual_description=f"{actual.width} column(s)",
                    expected_count=expected.width,
                    actual_count=actual.width,
                    expected_node=expected,
                    actual_node=actual,
                )
            return {index: index for index in expected_columns}, None

        if self.options.column_order is Order.INCLUDE:
            expected_names = [expected.header[i] for i in expected_columns]
            actual_names = [actual.header[i] for i in actual_columns]
            if expected_names != actual_names:
                differing = next(
                    (e for e, a in zip(expected_names, actual_names) if e != a),
                    max(expected_names, actual_names, key=len)[min(len(expected_names), len(actual_names))],
                )
                return None, Mismatch(
                    path=f'header, column "{differing}"',
                    kind=MismatchKind.COLUMN_COUNT_MISMATCH,
                    expected_description=", ".join(expected_names),
                    actual_description=", ".join(actual_names),
                    key=differing,
                    expected_count=len(expected_names),
                    actual_count=len(actual_names),
                    expected_node=expected,
                    actual_node=actual,
                )
            return dict(zip(expected_columns, actual_columns)), None

        def identities(table: Table, columns: list[int]) -> dict[tuple[str, int], int]:
            seen: dict[str, int] = {}
            result = {}
            for index in columns:
                name = table.header[index]
                occurrence = seen.get(name, 0)
                seen[name] = occurrence + 1
                result[(name, occurrence)] = index
            return result

        expected_ids = identities(expected, expected_columns)
        actual_ids = identities(actual, actual_columns)

        if set(expected_ids) != set(actual_ids):
            missing = [identity[0] for identity in expected_ids if identity not in actual_ids]
            unexpected = [identity[0] for identity in actual_ids if identity not in expected_ids]
            return None, Mismatch(
                path=f'header, column "{(missing or unexpected)[0]}"',
                kind=MismatchKind.COLUMN_COUNT_MISMATCH,
                expected_description=", ".join(expected.header[i] for i in expected_columns),
                actual_description=", ".join(actual.header[i] for i in actual_columns),
                key=(missing or unexpected)[0],
                expected_count=len(expected_columns),
                actual_count=len(actual_columns),
                expected_node=expected,
                actual_node=actual,
            )

        return {expected_ids[identity]: actual_ids[identity] for identity in expected_ids}, None

    def _invalid_row(self, table: Table, row: Row, side: str) -> Mismatch:
        return Mismatch(
            path=row_path(row.number),
            kind=MismatchKind.INVALID_ROW,
            expected_description=f"{table.width} cell(s)",
            actual_description=f"{len(row.cells)} cell(s)",
            key=f"{side} CSV",
            expected_count=table.width,
            actual_count=len(row.cells),
            expected_node=table if side == "expected" else None,
            actual_node=table if side == "actual" else None,
            expected_row=row.number if side == "expected" else None,
            actual_row=row.number if side == "actual" else None,
        )

    def _walk_table(self, expected: Table, actual: Table) -> Iterator[Mismatch]:
        mapping, column_mismatch = self._column_mapping(expected, actual)
        if column_mismatch is not None:
            yield column_mismatch
            return

        if expected.row_count != actual.row_count:
            yield Mismatch(
                path=ROOT_PATH,
                kind=MismatchKind.ROW_COUNT_MISMATCH,
                expected_description=f"{expected.row_count} row(s)",
                actual_description=f"{actual.row_count} row(s)",
                expected_count=expected.row_count,
                actual_count=actual.row_count,
                expected_node=expected,
                actual_node=actual,
            )

        for row in expected.invalid_rows:
            yield self._invalid_row(expected, row, "expected")
        for row in actual.invalid_rows:
            yield self._invalid_row(actual, row, "actual")

        expected_rows = [row for row in expected.rows if row.is_valid_for(expected.width)]
        actual_rows = [row for row in actual.rows if row.is_valid_for(actual.width)]

        if self.options.row_order is Order.IGNORE:
            expected_rows.sort(key=lambda row: self._row_key(row, list(mapping)))
            actual_rows.sort(key=lambda row: self._row_key(row, list(mapping.values())))

        for expected_row, actual_row in zip(expected_rows, actual_rows):
            for expected_index, actual_index in mapping.items():
                expected_cell = Scalar(expected_row.cells[expected_index], ScalarKind.CELL)
                actual_cell = Scalar(actual_row.cells[actual_index], ScalarKind.CELL)
                if self.normalizer.equal(expected_cell, actual_cell):
                    continue

                yield Mismatch(
                    path=cell_path(expected_row.number, expected.column_label(expected_index)),
                    kind=MismatchKind.VALUE_MISMATCH,
                    expected_description=describe_value(expected_cell),
                    actual_description=describe_value(actual_cell),
                    key=expected.header[expected_index] if expected.header else str(expected_index),
                    expected_node=expected,
                    actual_node=actual,
                    expected_row=expected_row.number,
                    actual_row=actual_row.number,
                )

    def _row_key(self, row: Row, columns: list[int]) -> tuple[str, ...]:
        return tuple(self.normalizer.normalize(row.cells[index]) for index in columns)


def compare(expected: Value, actual: Value, options: CompareOptions | None = None) -> ComparisonResult:
    """
    Compare two canonical values and report the first mismatch.

    Args:
        expected: Expected canonical value
        actual: Actual canonical value
        options: Ignore set, order policies and normalization

    Returns:
        ComparisonResult (equal when `mismatch` is None)
    """
    engine = ComparisonEngine(options)
    logger.debug(f"Comparing {type(expected).__name__} with {type(actual).__name__}")

    mismatch = next(engine.walk(expected, actual), None)
    if mismatch is not None:
        logger.info(f"Mismatch found ({mismatch.kind.value}) at {mismatch.path}")
    return ComparisonResult(mismatch)


def find_differences(
    expected: Value,
    actual: Value,
    options: CompareOptions | None = None,
    max_differences: int | None = None,
) -> list[Mismatch]:
    """
    Exhaustive variant of `compare`.

    Args:
        expected: Expected canonical value
        actual: Actual canonical value
        options: Ignore set, order policies and normalization
        max_differences: Stop after this many mismatches (None = all)

    Returns:
        List of Mismatch (empty if equal), first element as `compare` reports
    """
    engine = ComparisonEngine(options)
    differences: list[Mismatch] = []
    for mismatch in engine.walk(expected, actual):
        differences.append(mismatch)
        if max_differences is not None and len(differences) >= max_differences:
            break
    return differences
