"""
test_csv_table.py - CSV tokenizer, loader and writer

Test cases:
- Header present/missing, row numbering
- Quote and backslash-escape handling
- Custom separators and newline tokens
- Invalid rows kept for the comparison
- Writer quoting and reloading
"""

import pytest

from docequal import CompareOptions, CsvHeader, MalformedInputError, load_csv, render_csv
from docequal.domain.errors import ErrorCodes
from docequal.domain.model import Row, Table

# =============================================================================
# Loading
# =============================================================================

class TestLoad:
    """Text to Table."""

    def test_header_and_rows(self, people_csv):
        """First line is the header, rows are numbered from 1."""
        table = load_csv(people_csv)
        assert table.header == ("id", "name", "city")
        assert table.width == 3
        assert table.rows == (Row(1, ("1", "Ann", "Oslo")), Row(2, ("2", "Bob", "Rome")))

    def test_header_missing(self):
        """Without header all lines are rows and width comes from the first one."""
        table = load_csv("1,2\n3,4\n", CompareOptions(header=CsvHeader.MISSING))
        assert table.header is None
        assert table.width == 2
        assert [row.number for row in table.rows] == [1, 2]

    def test_header_only(self):
        """A header without rows is an empty table."""
        table = load_csv("a,b")
        assert table.header == ("a", "b")
        assert table.rows == ()

    def test_blank_lines_skipped(self):
        """Empty lines do not produce rows."""
        table = load_csv("a,b\n\n1,2\n\n")
        assert table.row_count == 1

    def test_crlf_tolerated(self):
        """Windows line endings load like \\n."""
        assert load_csv("a,b\r\n1,2\r\n") == load_csv("a,b\n1,2\n")

    def test_custom_separator_and_newline(self):
        """Separator and newline token are configurable."""
        options = CompareOptions(separator=";", newline="|")
        table = load_csv("a;b|1;2|3;4", options)
        assert table.rows[1].cells == ("3", "4")

    def test_surrounding_whitespace_kept(self):
        """Cells are not trimmed at load."""
        assert load_csv("a\n x \n").rows[0].cells == (" x ",)

    def test_invalid_rows_kept(self):
        """Rows with another cell count stay in the table."""
        table = load_csv("a,b\n1,2,3\n4,5\n")
        assert [row.number for row in table.invalid_rows] == [1]
        assert table.row_count == 2


class TestQuoting:
    """Quotes and escapes."""

    def test_quoted_separator_and_newline(self):
        """Quoted fields may hold the separator and newlines."""
        table = load_csv('a,b\n"x,y","line1\nline2"\n')
        assert table.rows[0].cells == ("x,y", "line1\nline2")

    def test_backslash_escapes_quote(self):
        """Backslash escapes the quote inside quotes."""
        table = load_csv('a\n"say \\"hi\\""\n')
        assert table.rows[0].cells == ('say "hi"',)

    def test_backslash_escapes_separator_outside_quotes(self):
        """Backslash also works in unquoted fields."""
        assert load_csv("a,b\nx\\,y,2\n").rows[0].cells == ("x,y", "2")

    def test_doubled_quote_is_not_an_escape(self):
        """Only the escape character escapes quotes."""
        assert load_csv('a\n"x""y"\n').rows[0].cells == ('x"y"',)

    def test_unclosed_quote(self):
        """A quote never closed is malformed, with its line."""
        with pytest.raises(MalformedInputError) as exc_info:
            load_csv('a,b\n1,"open\n2,3\n')
        assert exc_info.value.code == ErrorCodes.MALFORMED_CSV
        assert exc_info.value.context["line"] == 2


class TestLoadErrors:
    """Empty contents."""

    @pytest.mark.parametrize("text", ["", " \n \n"])
    def test_blank(self, text):
        """Blank input is rejected."""
        with pytest.raises(MalformedInputError) as exc_info:
            load_csv(text)
        assert exc_info.value.code == ErrorCodes.EMPTY_INPUT


# =============================================================================
# Writing
# =============================================================================

class TestRender:
    """Table to text."""

    def test_plain_cells_unquoted(self):
        """Plain values are written as-is."""
        table = Table(("a", "b"), (Row(1, ("1", "2")),), width=2)
        assert render_csv(table) == "a,b\n1,2"

    def test_special_cells_quoted_and_escaped(self):
        """Separators, quotes and escapes are protected."""
        table = Table(("a",), (Row(1, ('x,"y"\\z',)),), width=1)
        assert render_csv(table) == 'a\n"x,\\"y\\"\\\\z"'

    def test_single_empty_cell_quoted(self):
        """An empty single-cell row stays a row."""
        table = Table(("a",), (Row(1, ("",)),), width=1)
        assert render_csv(table) == 'a\n""'

    def test_reload_gives_same_table(self):
        """Rendering then loading gives an equal table."""
        options = CompareOptions(separator=";")
        table = Table(
            ("name", "note"),
            (Row(1, ("a;b", "multi\nline")), Row(2, ("", '"quoted"'))),
            width=2,
        )
        assert load_csv(render_csv(table, options), options) == table
