"""
TOML parser for polyparse.

Decoding is delegated to the standard library ``tomllib`` (TOML 1.0).
Date/time values are kept in the raw payload and rendered as ISO-8601
strings by ``StructuredData.data``.
"""

from __future__ import annotations

import logging
import tomllib
from typing import Any

from pydantic import BaseModel

from polyparse.exceptions import ParseSyntaxError
from polyparse.formats import DataFormat
from polyparse.parsers.base import BaseParser

logger = logging.getLogger(__name__)


class TomlParser(BaseParser):
    """Parser for TOML documents."""

    format = DataFormat.TOML

    def _parse(self, text: str, options: BaseModel) -> dict[str, Any]:
        try:
            return tomllib.loads(text)
        except (tomllib.TOMLDecodeError, RecursionError) as exc:
            raise ParseSyntaxError(f"Invalid TOML: {exc}") from exc
