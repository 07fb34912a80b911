"""
Parsers sub-package for polyparse.

Contains one parser per supported format, each converting already-decoded
text into a ``StructuredData`` value.

Design: Strategy Pattern over a closed set of formats
- base.py defines the BaseParser ABC and the ``get_parser()`` registry.
- json_parser.py delegates to the standard ``json`` decoder.
- xml_parser.py runs the hand-written tokenizer and tree builder.
- csv_parser.py implements an RFC4180-style tokenizer with header records.
- yaml_parser.py wraps PyYAML's ``safe_load``.
- toml_parser.py wraps ``tomllib``.

The fallback parser (auto.py) picks parsers from the registry at runtime.
"""

from polyparse.parsers.base import BaseParser, get_parser, read_text

__all__ = ["BaseParser", "get_parser", "read_text"]
