"""
JSON parser for polyparse.

Decoding is delegated to the standard library ``json`` module. Decoder
errors are re-raised as ``ParseSyntaxError`` with the decoder's message, and
so are integers beyond the interpreter's digit limit and nesting deeper than
the recursion limit.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel

from polyparse.exceptions import ParseSyntaxError
from polyparse.formats import DataFormat
from polyparse.parsers.base import BaseParser

logger = logging.getLogger(__name__)


class JsonParser(BaseParser):
    """Parser for JSON text."""

    format = DataFormat.JSON

    def _parse(self, text: str, options: BaseModel) -> Any:
        try:
            return json.loads(text)
        except (ValueError, RecursionError) as exc:
            # JSONDecodeError is a ValueError
            raise ParseSyntaxError(str(exc)) from exc
