"""
Unit tests for the CSV parser (polyparse.parsers.csv_parser).

Tests the row tokenizer (quotes, escaped quotes, embedded newlines, line
endings), header projection, and the ``require_delimiter`` switch used by
auto-detection.
"""

import pytest

from polyparse.config import CsvOptions
from polyparse.exceptions import ParseSyntaxError
from polyparse.parsers.csv_parser import CsvParser, finalize, parse_rows


class TestParseRows:
    """Tests for parse_rows()."""

    def test_simple_rows(self):
        assert parse_rows("a,b\nc,d") == [["a", "b"], ["c", "d"]]

    @pytest.mark.parametrize("text", ["a,b\r\nc,d", "a,b\rc,d", "a,b\nc,d\n"])
    def test_line_endings(self, text):
        assert parse_rows(text) == [["a", "b"], ["c", "d"]]

    def test_surrounding_blank_lines_are_trimmed(self):
        assert parse_rows("\n\na,b\n\n") == [["a", "b"]]

    def test_quoted_field_with_comma_and_newline(self):
        rows = parse_rows('name,note\n"Doe, J","line1\nline2"')
        assert rows == [["name", "note"], ["Doe, J", "line1\nline2"]]

    def test_doubled_quote_is_literal(self):
        assert parse_rows('"say ""hi""",x') == [['say "hi"', "x"]]

    def test_empty_fields(self):
        assert parse_rows("a,,c\n,,") == [["a", "", "c"], ["", "", ""]]

    def test_single_field(self):
        assert parse_rows("hello") == [["hello"]]

    @pytest.mark.parametrize("text", ["", "   ", "\n\r\n"])
    def test_empty_input(self, text):
        with pytest.raises(ParseSyntaxError, match="Data cannot be empty"):
            parse_rows(text)

    def test_unterminated_quote(self):
        with pytest.raises(
            ParseSyntaxError, match="Unexpected EOF while inside quoted field"
        ):
            parse_rows('a,"b\nc')


class TestRoundTrip:
    """Rows re-joined with commas and CRLF reproduce rectangular input."""

    @pytest.mark.parametrize(
        "text",
        ["a,b\r\nc,d", "1,2,3\r\n4,5,6\r\n7,8,9", "x", "name,age,city\r\nJohn,30,Oslo"],
    )
    def test_rejoin_reproduces_input(self, text):
        rows = parse_rows(text)
        assert "\r\n".join(",".join(row) for row in rows) == text


class TestFinalize:
    """Tests for header projection."""

    def test_without_header_rows_are_unchanged(self):
        rows = [["a", "b"], ["c", "d"]]
        assert finalize(rows, header=False) == rows

    def test_header_makes_records(self):
        rows = [["name", "age"], ["John", "30"], ["Jane", "25"]]
        assert finalize(rows, header=True) == [
            {"name": "John", "age": "30"},
            {"name": "Jane", "age": "25"},
        ]

    def test_header_only(self):
        assert finalize([["name", "age"]], header=True) == []

    def test_short_rows_are_padded_and_long_rows_truncated(self):
        rows = [["a", "b"], ["1"], ["1", "2", "3"]]
        assert finalize(rows, header=True) == [
            {"a": "1", "b": ""},
            {"a": "1", "b": "2"},
        ]

    def test_empty_header_cell_gets_positional_name(self):
        rows = [["a", "", "c"], ["1", "2", "3"]]
        assert finalize(rows, header=True) == [{"a": "1", "field1": "2", "c": "3"}]


class TestCsvParser:
    """Tests for the CsvParser options handling."""

    def test_default_returns_rows(self):
        value = CsvParser().parse_text("name,age\nJohn,30")
        assert value.raw == [["name", "age"], ["John", "30"]]

    def test_header_option_as_mapping(self):
        value = CsvParser().parse_text("name,age\nJohn,30", {"header": True})
        assert value.data == [{"name": "John", "age": "30"}]

    def test_header_option_as_model(self):
        value = CsvParser().parse_text("name,age\nJohn,30", CsvOptions(header=True))
        assert value.data == [{"name": "John", "age": "30"}]

    def test_require_delimiter_rejects_plain_text(self):
        with pytest.raises(ParseSyntaxError, match="No delimiter found"):
            CsvParser().parse_text("just some words", {"require_delimiter": True})

    def test_require_delimiter_accepts_a_table(self):
        value = CsvParser().parse_text("a\nb,c", {"require_delimiter": True})
        assert value.raw == [["a"], ["b", "c"]]
