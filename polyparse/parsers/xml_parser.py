"""
XML parser for polyparse.

Runs the tokenizer and tree builder from ``polyparse.xml`` and stores the
resulting ``XmlDocument`` as the raw payload. The object projection (with
sibling grouping) is derived later by ``StructuredData.data``.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel

from polyparse.formats import DataFormat
from polyparse.parsers.base import BaseParser
from polyparse.xml import XmlDocument, parse_document

logger = logging.getLogger(__name__)


class XmlParser(BaseParser):
    """Parser for XML text."""

    format = DataFormat.XML

    def _parse(self, text: str, options: BaseModel) -> XmlDocument:
        document = parse_document(text)
        logger.debug("XML document root '%s' (%d nodes)", document.root.tag, len(document))
        return document
