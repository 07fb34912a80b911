"""
Unit tests for the parser registry and the JSON, YAML and TOML parsers.

Tests the ``BaseParser`` boundary (options validation, file reading) with
real parsers, plus each parser's success and failure behavior.
"""

import io

import pytest

from polyparse.exceptions import ConfigValidationError, ParseSyntaxError, UnknownFormatError
from polyparse.formats import DataFormat
from polyparse.parsers import BaseParser, get_parser, read_text
from polyparse.parsers.csv_parser import CsvParser
from polyparse.parsers.json_parser import JsonParser
from polyparse.parsers.toml_parser import TomlParser
from polyparse.parsers.xml_parser import XmlParser
from polyparse.parsers.yaml_parser import YamlParser
from polyparse.xml import XmlDocument


class TestRegistry:
    """Tests for get_parser()."""

    @pytest.mark.parametrize(
        "fmt, cls",
        [
            ("json", JsonParser),
            ("xml", XmlParser),
            ("csv", CsvParser),
            ("yaml", YamlParser),
            ("toml", TomlParser),
        ],
    )
    def test_every_format_has_a_parser(self, fmt, cls):
        parser = get_parser(fmt)
        assert isinstance(parser, cls)
        assert isinstance(parser, BaseParser)
        assert parser.format is DataFormat(fmt)

    def test_lookup_is_case_insensitive(self):
        assert get_parser("JSON") is get_parser(DataFormat.JSON)

    def test_unknown_format(self):
        with pytest.raises(UnknownFormatError, match="Unsupported format: 'ini'"):
            get_parser("ini")

    def test_repr(self):
        assert repr(get_parser("xml")) == "XmlParser(format='xml')"


class TestOptions:
    """Tests for options validation at the parser boundary."""

    def test_options_rejected_by_optionless_parser(self):
        with pytest.raises(ConfigValidationError, match="json parser"):
            get_parser("json").parse_text("{}", {"header": True})

    def test_unknown_csv_option(self):
        with pytest.raises(ConfigValidationError):
            get_parser("csv").parse_text("a,b", {"delimiter": ";"})

    def test_bad_csv_option_type(self):
        with pytest.raises(ConfigValidationError):
            get_parser("csv").parse_text("a,b", {"header": "maybe"})

    def test_none_means_defaults(self):
        assert get_parser("csv").options(None).header is False


class TestParseFile:
    """Tests for parse_file() and read_text()."""

    def test_parse_file_from_path(self, write_sample):
        path = write_sample("person.json", '{"name": "John"}')
        value = get_parser("json").parse_file(path)
        assert value.data == {"name": "John"}

    def test_parse_file_from_str_path(self, write_sample):
        path = write_sample("rows.csv", "a,b\nc,d")
        value = get_parser("csv").parse_file(str(path), {"header": True})
        assert value.data == [{"a": "c", "b": "d"}]

    def test_parse_file_from_handle(self):
        value = get_parser("yaml").parse_file(io.StringIO("name: John\n"))
        assert value.data == {"name": "John"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_parser("json").parse_file(tmp_path / "missing.json")

    def test_read_text_handle(self):
        assert read_text(io.StringIO("abc")) == "abc"


class TestJsonParser:
    """Tests for JsonParser."""

    def test_object(self):
        value = JsonParser().parse_text('{"name": "John", "age": 30, "tags": [true, null]}')
        assert value.origin_format is DataFormat.JSON
        assert value.data == {"name": "John", "age": 30, "tags": [True, None]}

    @pytest.mark.parametrize("text", ["{]", "", "{'a': 1}", "[1, 2"])
    def test_invalid(self, text):
        with pytest.raises(ParseSyntaxError):
            JsonParser().parse_text(text)

    def test_oversized_integer(self):
        with pytest.raises(ParseSyntaxError, match="digits"):
            JsonParser().parse_text("[" + "1" * 5000 + "]")

    def test_nesting_beyond_recursion_limit(self):
        depth = 100_000
        with pytest.raises(ParseSyntaxError):
            JsonParser().parse_text("[" * depth + "]" * depth)


class TestYamlParser:
    """Tests for YamlParser."""

    def test_mapping(self):
        value = YamlParser().parse_text("name: John\nage: 30\ntags:\n  - a\n  - b\n")
        assert value.data == {"name": "John", "age": 30, "tags": ["a", "b"]}

    def test_flow_mapping(self):
        assert YamlParser().parse_text("{a: 1}").data == {"a": 1}

    def test_sequence(self):
        assert YamlParser().parse_text("- x\n- y").data == ["x", "y"]

    @pytest.mark.parametrize("text", ["", "   \n", "---\n", "# only a comment"])
    def test_empty(self, text):
        with pytest.raises(ParseSyntaxError, match="Data cannot be empty"):
            YamlParser().parse_text(text)

    @pytest.mark.parametrize("text", ["just text", "42", "true"])
    def test_scalar_is_rejected(self, text):
        with pytest.raises(ParseSyntaxError, match="mapping or a sequence"):
            YamlParser().parse_text(text)

    def test_invalid(self):
        with pytest.raises(ParseSyntaxError, match="Invalid YAML"):
            YamlParser().parse_text("key: [unclosed")

    def test_oversized_integer(self):
        with pytest.raises(ParseSyntaxError, match="Invalid YAML"):
            YamlParser().parse_text("n: " + "1" * 5000)

    def test_dates_are_iso_strings_in_data(self):
        value = YamlParser().parse_text("when: 2024-01-01\nat: 2024-01-01 10:30:00\n")
        assert value.data == {"when": "2024-01-01", "at": "2024-01-01T10:30:00"}
        assert value.to_json() == '{"when": "2024-01-01", "at": "2024-01-01T10:30:00"}'

    def test_set_and_binary_are_jsonable(self):
        value = YamlParser().parse_text("tags: !!set {b: null, a: null}\nblob: !!binary aGk=\n")
        assert value.data == {"tags": ["a", "b"], "blob": "aGk="}


class TestTomlParser:
    """Tests for TomlParser."""

    def test_tables_and_dates(self):
        text = 'title = "Example"\n\n[owner]\nname = "Tom"\ndob = 1979-05-27\n'
        value = TomlParser().parse_text(text)
        assert value.origin_format is DataFormat.TOML
        assert value.data == {
            "title": "Example",
            "owner": {"name": "Tom", "dob": "1979-05-27"},
        }

    def test_raw_keeps_date_objects(self):
        import datetime as dt

        value = TomlParser().parse_text("when = 1979-05-27T07:32:00Z")
        assert isinstance(value.raw["when"], dt.datetime)
        assert value.data["when"].startswith("1979-05-27T07:32:00")

    def test_invalid(self):
        with pytest.raises(ParseSyntaxError, match="Invalid TOML"):
            TomlParser().parse_text("title = ")


class TestXmlParser:
    """Tests for XmlParser."""

    def test_raw_is_document(self):
        value = XmlParser().parse_text("<person><name>John</name></person>")
        assert isinstance(value.raw, XmlDocument)
        assert value.data == {"person": {"name": "John"}}

    def test_invalid(self):
        with pytest.raises(ParseSyntaxError, match="Unexpected EOF"):
            XmlParser().parse_text("<root><item>Unclosed tag")
