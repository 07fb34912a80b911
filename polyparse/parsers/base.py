"""
Base parser ABC and parser registry for polyparse.

All format parsers implement this interface. The contract is:
1. ``parse_text()`` takes already-decoded text plus optional options and
   returns a ``StructuredData`` value, or raises. It never returns a
   partially built value.
2. ``parse_file()`` is a thin I/O shim: read the file, then delegate to
   ``parse_text()``.

Subclasses only implement ``_parse()``, which turns text into the
format-native payload. Option validation, logging and wrapping happen here
so every format behaves the same at the boundary.

Why an ABC plus a closed registry:
- The set of formats is closed (``DataFormat``); ``get_parser()`` covers
  every member, so the fallback parser's dispatch is exhaustive.
- Parsers are stateless; one shared instance per format is enough.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from typing import IO, Any, ClassVar, Mapping, Union

from pydantic import BaseModel, ValidationError

from polyparse.config import NoOptions
from polyparse.exceptions import ConfigValidationError
from polyparse.formats import DataFormat
from polyparse.structured import StructuredData

logger = logging.getLogger(__name__)

Options = Union[BaseModel, Mapping[str, Any], None]
FileSource = Union[str, "os.PathLike[str]", IO[str]]


class BaseParser(ABC):
    """Abstract base class for format parsers.

    Class attributes:
        format: The ``DataFormat`` this parser produces.
        options_model: Pydantic model validating the options mapping.
    """

    format: ClassVar[DataFormat]
    options_model: ClassVar[type[BaseModel]] = NoOptions

    def __repr__(self) -> str:
        return f"{type(self).__name__}(format={self.format.value!r})"

    def options(self, options: Options = None) -> BaseModel:
        """Validate *options* into this parser's options model.

        Raises:
            ConfigValidationError: If the options do not fit the model.
        """
        if options is None:
            return self.options_model()
        if isinstance(options, self.options_model):
            return options
        if isinstance(options, BaseModel):
            options = options.model_dump()
        try:
            return self.options_model.model_validate(dict(options))
        except ValidationError as exc:
            raise ConfigValidationError(
                f"Invalid options for the {self.format.value} parser: {exc}"
            ) from exc

    def parse_text(self, text: str, options: Options = None) -> StructuredData:
        """Parse already-decoded text into a ``StructuredData`` value.

        Raises:
            ParseSyntaxError: If the text is malformed for this format.
            ConfigValidationError: If *options* are invalid.
        """
        opts = self.options(options)
        raw = self._parse(text, opts)
        logger.debug("Parsed %d characters as %s", len(text), self.format.value)
        return StructuredData(self.format, raw)

    def parse_file(
        self,
        source: FileSource,
        options: Options = None,
        encoding: str = "utf-8",
    ) -> StructuredData:
        """Read a path (or an open text handle) and parse its content.

        Raises:
            OSError: If the file cannot be read.
            ParseSyntaxError: If the content is malformed for this format.
        """
        text = read_text(source, encoding=encoding)
        return self.parse_text(text, options)

    @abstractmethod
    def _parse(self, text: str, options: BaseModel) -> Any:
        """Turn *text* into the format-native payload.

        Raises:
            ParseSyntaxError: If the text is malformed for this format.
        """


def read_text(source: FileSource, encoding: str = "utf-8") -> str:
    """Read the whole of a path or an open text handle."""
    if hasattr(source, "read"):
        return source.read()
    with open(source, "r", encoding=encoding) as f:
        return f.read()


# Maps each DataFormat to its (stateless) parser instance
_PARSER_MAP: dict[DataFormat, BaseParser] = {}


def _get_parser_map() -> dict[DataFormat, BaseParser]:
    """Lazily build the parser map to avoid circular imports."""
    if not _PARSER_MAP:
        from polyparse.parsers.csv_parser import CsvParser
        from polyparse.parsers.json_parser import JsonParser
        from polyparse.parsers.toml_parser import TomlParser
        from polyparse.parsers.xml_parser import XmlParser
        from polyparse.parsers.yaml_parser import YamlParser

        for parser in (JsonParser(), XmlParser(), CsvParser(), YamlParser(), TomlParser()):
            _PARSER_MAP[parser.format] = parser
    return _PARSER_MAP


def get_parser(fmt: DataFormat | str) -> BaseParser:
    """Return the parser for *fmt*.

    Raises:
        UnknownFormatError: If *fmt* names no supported format.
    """
    return _get_parser_map()[DataFormat.coerce(fmt)]
