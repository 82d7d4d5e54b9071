"""
CSV parser and writer: raw text ⇄ canonical Table.

Quoting convention (single, documented):
- A field starting with the quote character may contain the separator, the
  newline token and escaped quotes
- The escape character (backslash by default) escapes the next character,
  inside or outside quotes; doubled quotes are NOT an escape
- Surrounding quotes are removed, surrounding whitespace is kept

Rows whose cell count differs from the table width are kept as-is so the
comparison can report them as invalid rows with their row number.
"""

import logging

from docequal.domain.errors import ErrorCodes, MalformedInputError
from docequal.domain.model import Row, Table
from docequal.domain.options import CompareOptions, CsvHeader, resolve_options

logger = logging.getLogger(__name__)


def _match_newline(text: str, index: int, newline: str) -> int:
    """Length of the newline token at `index`, or 0."""
    if text.startswith(newline, index):
        return len(newline)
    # Platform newlines are tolerated next to the configured token
    if newline == "\n" and text.startswith("\r\n", index):
        return 2
    if newline == "\r\n" and text[index] == "\n":
        return 1
    return 0


def split_csv(text: str, options: CompareOptions, label: str = "CSV") -> list[list[str]]:
    """
    Split raw CSV text into rows of field values.

    Blank lines are skipped.

    Raises:
        MalformedInputError: When a quoted field is never closed
    """
    separator, quote, escape, newline = options.separator, options.quote, options.escape, options.newline

    rows: list[list[str]] = []
    fields: list[str] = []
    buffer: list[str] = []
    quoted = False
    row_has_content = False
    quote_line = line = 1
    index, length = 0, len(text)

    def end_row() -> None:
        nonlocal fields, buffer, row_has_content
        fields.append("".join(buffer))
        if row_has_content:
            rows.append(fields)
        fields, buffer, row_has_content = [], [], False

    while index < length:
        char = text[index]

        if char == escape and index + 1 < length:
            buffer.append(text[index + 1])
            row_has_content = True
            index += 2
            continue

        if quoted:
            if char == quote:
                quoted = False
            else:
                if char == "\n":
                    line += 1
                buffer.append(char)
            index += 1
            continue

        if char == quote and not buffer:
            quoted = True
            quote_line = line
            row_has_content = True
            index += 1
            continue

        if char == separator:
            fields.append("".join(buffer))
            buffer = []
            row_has_content = True
            index += 1
            continue

        newline_length = _match_newline(text, index, newline)
        if newline_length:
            end_row()
            line += 1
            index += newline_length
            continue

        buffer.append(char)
        row_has_content = True
        index += 1

    if quoted:
        raise MalformedInputError(
            ErrorCodes.MALFORMED_CSV,
            f"Cannot correctly load the {label} contents: quoted field starting at line {quote_line} is never closed",
            document=label,
            line=quote_line,
        )

    end_row()
    return rows


def load_csv(text: str, options: CompareOptions | None = None, label: str = "CSV") -> Table:
    """
    Load raw CSV text into the canonical model.

    Args:
        text: Raw CSV contents
        options: Separator, newline, quote, escape and header settings
        label: Document label used in error messages

    Returns:
        Table; rows with another cell count than the width are kept

    Raises:
        MalformedInputError: On blank contents or an unclosed quote
        InvalidOptionsError: On invalid CSV settings
    """
    options = resolve_options(options)

    if not isinstance(text, str) or not text.strip():
        raise MalformedInputError(
            ErrorCodes.EMPTY_INPUT,
            f"Cannot load blank {label} contents",
            document=label,
        )

    lines = split_csv(text, options, label)
    if not lines:
        raise MalformedInputError(
            ErrorCodes.EMPTY_INPUT,
            f"Cannot load {label} contents without any rows",
            document=label,
        )

    if options.header is CsvHeader.PRESENT:
        header: tuple[str, ...] | None = tuple(lines[0])
        body = lines[1:]
        width = len(lines[0])
    else:
        header = None
        body = lines
        width = len(lines[0])

    rows = tuple(Row(number, tuple(cells)) for number, cells in enumerate(body, start=1))
    table = Table(header=header, rows=rows, width=width)

    invalid = table.invalid_rows
    if invalid:
        logger.debug(
            f"{label} table has {len(invalid)} row(s) without {width} cells: "
            f"{[row.number for row in invalid]}"
        )
    return table


# =============================================================================
# Writer
# =============================================================================

def _quote_field(value: str, options: CompareOptions, only_cell: bool) -> str:
    special = {options.separator, options.quote, options.escape, "\n", "\r", *options.newline}
    needs_quotes = any(char in special for char in value) or (only_cell and value == "")
    if not needs_quotes:
        return value

    escaped = value.replace(options.escape, options.escape * 2)
    escaped = escaped.replace(options.quote, options.escape + options.quote)
    return f"{options.quote}{escaped}{options.quote}"


def render_line(cells: tuple[str, ...] | list[str], options: CompareOptions) -> str:
    """Render one row with the configured separator and quoting."""
    only_cell = len(cells) == 1
    return options.separator.join(_quote_field(cell, options, only_cell) for cell in cells)


def render_csv(table: Table, options: CompareOptions | None = None) -> str:
    """
    Render a table back to CSV text.

    Loading the result with the same options yields an equal table.
    """
    options = resolve_options(options)
    lines = []
    if table.header is not None and options.header is CsvHeader.PRESENT:
        lines.append(render_line(table.header, options))
    lines.extend(render_line(row.cells, options) for row in table.rows)
    return options.newline.join(lines)
