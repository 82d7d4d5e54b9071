"""
Canonical value model shared by the format parsers and the comparison engine.

Every parser turns raw text into one of these immutable values:
- Scalar: a leaf (XML text, JSON string/number/boolean/null, CSV cell)
- Object: JSON object or XML element (attributes first, then children)
- Array: JSON array or repeated XML sibling elements
- Table: CSV header + rows, invalid rows kept as-is
"""

from dataclasses import dataclass, field
from enum import Enum

from .constants import ROOT_PATH


class ScalarKind(str, Enum):
    """Origin of a scalar; scalars of a different kind never compare equal."""
    TEXT = "text"         # XML element/attribute text
    STRING = "string"     # JSON
    NUMBER = "number"     # JSON
    BOOLEAN = "boolean"   # JSON
    NULL = "null"         # JSON
    CELL = "cell"         # CSV


@dataclass(frozen=True)
class Scalar:
    """Leaf value, compared as text."""
    text: str
    kind: ScalarKind = ScalarKind.TEXT


@dataclass(frozen=True)
class Object:
    """
    Named entries with unique names.

    Entry order follows the source but is never significant for comparison.
    `attributes` lists the entry names that came from XML attributes, so the
    report can render them back as attributes.
    """
    entries: tuple[tuple[str, "Value"], ...] = ()
    attributes: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        names = [name for name, _ in self.entries]
        if len(names) != len(set(names)):
            raise ValueError(f"Object entry names must be unique, got {names}")

    def keys(self) -> list[str]:
        return [name for name, _ in self.entries]

    def get(self, name: str) -> "Value | None":
        for key, value in self.entries:
            if key == name:
                return value
        return None

    def __contains__(self, name: object) -> bool:
        return any(key == name for key, _ in self.entries)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class Array:
    """Ordered values; order is significant unless the options say otherwise."""
    items: tuple["Value", ...] = ()

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class Row:
    """A CSV row; `number` is 1-based and excludes the header line."""
    number: int
    cells: tuple[str, ...]

    def is_valid_for(self, width: int) -> bool:
        return len(self.cells) == width


@dataclass(frozen=True)
class Table:
    """
    CSV table.

    `width` is the header length, or the first row's length when the header
    is missing. Rows with another cell count stay in `rows` and are reported
    by the engine as invalid rows.
    """
    header: tuple[str, ...] | None
    rows: tuple[Row, ...] = ()
    width: int = 0

    @property
    def has_header(self) -> bool:
        return self.header is not None

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def invalid_rows(self) -> list[Row]:
        return [row for row in self.rows if not row.is_valid_for(self.width)]

    def column_label(self, index: int) -> str:
        """Column identifier used in locations: header name or 0-based index."""
        if self.header is not None and index < len(self.header):
            return f'column "{self.header[index]}"'
        return f"column {index}"


Value = Scalar | Object | Array | Table


# =============================================================================
# Locations
# =============================================================================

def child_path(parent: str, name: str) -> str:
    """`/` + `a` → `/a`, `/a` + `b` → `/a/b`."""
    if parent == ROOT_PATH:
        return f"/{name}"
    return f"{parent}/{name}"


def index_path(parent: str, index: int) -> str:
    """`/items` + 2 → `/items[2]`, `/` + 0 → `/[0]`."""
    return f"{parent}[{index}]"


def row_path(row_number: int) -> str:
    return f"row {row_number}"


def cell_path(row_number: int, column_label: str) -> str:
    return f"row {row_number}, {column_label}"


def describe_type(value: Value | None) -> str:
    """Short variant description used in type mismatch messages."""
    if value is None:
        return "nothing"
    if isinstance(value, Scalar):
        return {
            ScalarKind.TEXT: "a text value",
            ScalarKind.STRING: "a string",
            ScalarKind.NUMBER: "a number",
            ScalarKind.BOOLEAN: "a boolean",
            ScalarKind.NULL: "null",
            ScalarKind.CELL: "a cell value",
        }[value.kind]
    if isinstance(value, Object):
        return "an object"
    if isinstance(value, Array):
        return "an array"
    return "a table"
