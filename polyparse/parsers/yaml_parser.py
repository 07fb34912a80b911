"""
YAML parser for polyparse.

Uses PyYAML's ``safe_load`` (no arbitrary object construction). Only
structured documents are accepted: an empty document or a bare scalar is
rejected, because nearly any line of plain text is a valid YAML scalar and
would otherwise swallow every input during auto-detection.
"""

from __future__ import annotations

import logging
from typing import Any

import yaml
from pydantic import BaseModel

from polyparse.exceptions import ParseSyntaxError
from polyparse.formats import DataFormat
from polyparse.parsers.base import BaseParser

logger = logging.getLogger(__name__)


class YamlParser(BaseParser):
    """Parser for YAML text (single document)."""

    format = DataFormat.YAML

    def _parse(self, text: str, options: BaseModel) -> Any:
        try:
            value = yaml.safe_load(text)
        except (yaml.YAMLError, ValueError, RecursionError) as exc:
            raise ParseSyntaxError(f"Invalid YAML: {exc}") from exc
        if value is None:
            raise ParseSyntaxError("Data cannot be empty")
        if not isinstance(value, (dict, list)):
            raise ParseSyntaxError("YAML document must be a mapping or a sequence")
        return value
