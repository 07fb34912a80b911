"""
polyparse: parse JSON, XML, CSV, YAML and TOML text into one structured value.

Public API surface:

- ``parse(text, fmt=None, ...)`` -- **recommended entry point**. With a
  format, parses the text as that format; without one, detects the format
  and falls back through the others (see ``parse_any``).

- ``load(path, fmt=None, ...)`` -- the same for a file path or an open text
  handle.

- ``StructuredData`` -- the result: ``origin_format``, ``raw`` and the
  normalized ``data`` view, plus ``to_json`` / ``to_yaml`` / ``to_csv`` /
  ``to_xml`` / ``to_frame`` / ``export``.

Lower-level pieces are importable from their modules: ``detect_format``
(polyparse.detect), ``get_parser`` (polyparse.parsers), the XML stages
(polyparse.xml) and the config models (polyparse.config).
"""

from __future__ import annotations

import logging

from polyparse.auto import AutoParser, load_any, parse_any
from polyparse.config import CsvOptions, FallbackConfig, load_config, save_config
from polyparse.detect import detect_format
from polyparse.exceptions import (
    AllFormatsFailedError,
    ConfigValidationError,
    ExportError,
    ParseSyntaxError,
    PolyparseError,
    UnknownFormatError,
    UnsupportedViewError,
)
from polyparse.formats import DataFormat
from polyparse.parsers.base import FileSource, Options, get_parser
from polyparse.structured import StructuredData

__all__ = [
    "AllFormatsFailedError",
    "AutoParser",
    "ConfigValidationError",
    "CsvOptions",
    "DataFormat",
    "ExportError",
    "FallbackConfig",
    "ParseSyntaxError",
    "PolyparseError",
    "StructuredData",
    "UnknownFormatError",
    "UnsupportedViewError",
    "detect_format",
    "get_parser",
    "load",
    "load_any",
    "load_config",
    "parse",
    "parse_any",
    "save_config",
]

__version__ = "0.1.0"

logger = logging.getLogger(__name__)


def parse(
    text: str,
    fmt: DataFormat | str | None = None,
    options: Options = None,
    suppress_errors: bool = False,
) -> StructuredData | None:
    """Parse *text* as *fmt*, or auto-detect when *fmt* is None.

    Args:
        text: The complete input text.
        fmt: ``"json"``, ``"xml"``, ``"csv"``, ``"yaml"``, ``"toml"`` (or a
            ``DataFormat``). If None, the fallback parser is used.
        options: Parser options, e.g. ``{"header": True}`` for CSV. Only
            valid together with *fmt*.
        suppress_errors: Only for auto-detection: return None instead of
            raising when no format accepts the text.

    Returns:
        A ``StructuredData`` value (or None under suppression).

    Raises:
        ParseSyntaxError: If *text* is malformed for *fmt*.
        AllFormatsFailedError: If auto-detection found no working format.
        ConfigValidationError: If *options* are invalid for *fmt*.

    Examples::

        polyparse.parse("name,age\\nJohn,30", "csv", {"header": True}).data
        # [{'name': 'John', 'age': '30'}]

        polyparse.parse("<person><name>John</name></person>").data
        # {'person': {'name': 'John'}}
    """
    if fmt is None:
        if options is not None:
            raise ConfigValidationError("Parser options require an explicit format.")
        return parse_any(text, suppress_errors=suppress_errors)
    return get_parser(fmt).parse_text(text, options)


def load(
    source: FileSource,
    fmt: DataFormat | str | None = None,
    options: Options = None,
    suppress_errors: bool = False,
    encoding: str = "utf-8",
) -> StructuredData | None:
    """File counterpart of ``parse()``.

    The format is taken from *fmt* or detected from the content, never from
    the file extension.

    Raises:
        OSError: If the file cannot be read (unless auto-detecting with
            *suppress_errors*).
    """
    if fmt is None:
        if options is not None:
            raise ConfigValidationError("Parser options require an explicit format.")
        return load_any(source, suppress_errors=suppress_errors, encoding=encoding)
    logger.info("load() -- source=%s, format=%s", source, DataFormat.coerce(fmt).value)
    return get_parser(fmt).parse_file(source, options, encoding=encoding)
