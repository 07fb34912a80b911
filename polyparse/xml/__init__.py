"""
XML sub-package for polyparse.

Three stages, each usable on its own:

- tokenizer.py -- raw text -> flat list of ``Token``.
- tree.py      -- tokens -> arena-backed ``XmlDocument``.
- projector.py -- ``XmlDocument`` -> JSON-like value with sibling grouping.

``parse_document()`` chains the first two; the XML parser in
``polyparse.parsers.xml_parser`` stores the resulting document as the raw
payload and ``StructuredData.data`` runs the projector on demand.
"""

from __future__ import annotations

from polyparse.xml.projector import VALUE_KEY, XmlValue, project, project_node
from polyparse.xml.tokenizer import Token, TokenKind, decode_entities, tokenize
from polyparse.xml.tree import XmlDocument, XmlNode, build

__all__ = [
    "Token",
    "TokenKind",
    "VALUE_KEY",
    "XmlDocument",
    "XmlNode",
    "XmlValue",
    "build",
    "decode_entities",
    "parse_document",
    "project",
    "project_node",
    "tokenize",
]


def parse_document(text: str) -> XmlDocument:
    """Tokenize and build *text* into an ``XmlDocument``."""
    return build(tokenize(text))
