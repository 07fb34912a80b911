"""
XML tokenizer: raw text -> flat list of typed tokens.

A single forward scan with an index cursor. ``<`` switches into tag mode
and dispatches on the following characters to one sub-scanner:

    <?  ... ?>            processing instruction
    </  ... >             end tag
    <!-- ... -->          comment
    <![CDATA[ ... ]]>     CDATA section
    <!DOCTYPE ... >       doctype declaration
    <name                 start tag (stays open for attributes)

Start tags stay open after their name so the scanner can emit attribute
name/value tokens; ``/>`` emits an EMPTY_ELEMENT_TAG and ``>`` closes the
tag. Outside tags, whitespace is skipped and any other run up to the next
``<`` becomes a TEXT token.

TEXT and ATTRIBUTE_VALUE values are HTML-entity decoded (``&amp;``,
``&#169;``, ``&#xA9;``); CDATA is kept verbatim.

This is not a conforming XML parser: namespaces are kept as part of the
name and no DTD is processed.
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from enum import Enum, auto

from polyparse.exceptions import ParseSyntaxError

logger = logging.getLogger(__name__)

_WHITESPACE = " \t\r\n"
# Characters that end a tag or attribute name
_NAME_STOP = _WHITESPACE + "=/>"


class TokenKind(Enum):
    """Kinds of tokens produced by ``tokenize()``."""

    COMMENT = auto()
    CDATA = auto()
    PROCESSING_INSTRUCTION = auto()
    DOCTYPE_DECL = auto()
    START_TAG = auto()
    END_TAG = auto()
    EMPTY_ELEMENT_TAG = auto()
    ATTRIBUTE_NAME = auto()
    ATTRIBUTE_VALUE = auto()
    TEXT = auto()


@dataclass(frozen=True)
class Token:
    """A single XML token."""

    kind: TokenKind
    value: str


def decode_entities(value: str) -> str:
    """Replace ``&name;``, ``&#N;`` and ``&#xH;`` escapes with their characters."""
    return html.unescape(value)


class _Scanner:
    """Per-call tokenizer state. Never shared between calls."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.n = len(text)
        self.i = 0
        self.tokens: list[Token] = []
        # Name of the start tag currently open, None when outside a tag
        self.open_tag: str | None = None

    # -- helpers ------------------------------------------------------------

    def _emit(self, kind: TokenKind, value: str) -> None:
        self.tokens.append(Token(kind, value))

    def _find(self, terminator: str, start: int) -> int:
        end = self.text.find(terminator, start)
        if end == -1:
            raise ParseSyntaxError(f"Unexpected EOF: expected '{terminator}'")
        return end

    def _read_name(self) -> str:
        start = self.i
        while self.i < self.n and self.text[self.i] not in _NAME_STOP:
            if self.text[self.i] in "<\"'":
                raise ParseSyntaxError(
                    f"Unexpected character '{self.text[self.i]}' in name"
                )
            self.i += 1
        return self.text[start:self.i]

    def _skip_whitespace(self) -> None:
        while self.i < self.n and self.text[self.i] in _WHITESPACE:
            self.i += 1

    # -- main loop ----------------------------------------------------------

    def run(self) -> list[Token]:
        while self.i < self.n:
            if self.open_tag is not None:
                self._scan_inside_tag()
                continue

            c = self.text[self.i]
            if c == "<":
                self._scan_markup()
            elif c == ">":
                raise ParseSyntaxError("Unexpected '>' outside of a tag")
            elif c in _WHITESPACE:
                self.i += 1
            else:
                self._scan_text()

        if self.open_tag is not None:
            raise ParseSyntaxError("Unexpected EOF: expected '>'")
        return self.tokens

    def _scan_text(self) -> None:
        end = self.text.find("<", self.i)
        if end == -1:
            end = self.n
        self._emit(TokenKind.TEXT, decode_entities(self.text[self.i:end]))
        self.i = end

    def _scan_markup(self) -> None:
        rest = self.text.startswith
        if rest("<?", self.i):
            end = self._find("?>", self.i + 2)
            self._emit(TokenKind.PROCESSING_INSTRUCTION, self.text[self.i + 2:end])
            self.i = end + 2
        elif rest("</", self.i):
            end = self._find(">", self.i + 2)
            name = self.text[self.i + 2:end].strip()
            if not name:
                raise ParseSyntaxError("Expected tag name in end tag")
            self._emit(TokenKind.END_TAG, name)
            self.i = end + 1
        elif rest("<!--", self.i):
            end = self._find("-->", self.i + 4)
            self._emit(TokenKind.COMMENT, self.text[self.i + 4:end])
            self.i = end + 3
        elif rest("<![CDATA[", self.i):
            end = self._find("]]>", self.i + 9)
            self._emit(TokenKind.CDATA, self.text[self.i + 9:end])
            self.i = end + 3
        elif self.text[self.i + 1:self.i + 9].upper() == "!DOCTYPE":
            self._scan_doctype()
        elif rest("<!", self.i):
            raise ParseSyntaxError("Unexpected '!' construct")
        else:
            self.i += 1
            name = self._read_name()
            if not name:
                raise ParseSyntaxError("Expected tag name after '<'")
            self._emit(TokenKind.START_TAG, name)
            self.open_tag = name

    def _scan_doctype(self) -> None:
        start = self.i + 9
        close = self._find(">", start)
        bracket = self.text.find("[", start, close)
        if bracket != -1:
            # Internal subset may itself contain '>'
            subset_end = self._find("]", bracket)
            close = self._find(">", subset_end)
        self._emit(TokenKind.DOCTYPE_DECL, self.text[start:close].strip())
        self.i = close + 1

    def _scan_inside_tag(self) -> None:
        c = self.text[self.i]
        if c in _WHITESPACE:
            self._skip_whitespace()
        elif c == ">":
            self.open_tag = None
            self.i += 1
        elif c == "/":
            self.i += 1
            if self.i >= self.n:
                raise ParseSyntaxError("Unexpected EOF: expected '>'")
            if self.text[self.i] != ">":
                raise ParseSyntaxError("Expected '>' after '/' in tag")
            self._emit(TokenKind.EMPTY_ELEMENT_TAG, self.open_tag)
            self.open_tag = None
            self.i += 1
        elif c == "=":
            self.i += 1
            self._skip_whitespace()
            self._scan_attribute_value()
        elif c == "<":
            raise ParseSyntaxError(f"Unexpected '<' inside tag '{self.open_tag}'")
        else:
            self._emit(TokenKind.ATTRIBUTE_NAME, self._read_name())

    def _scan_attribute_value(self) -> None:
        if self.i >= self.n:
            raise ParseSyntaxError("Unexpected EOF: expected attribute value")
        quote = self.text[self.i]
        if quote not in "\"'":
            raise ParseSyntaxError(
                f"Expected quoted attribute value in tag '{self.open_tag}'"
            )
        end = self._find(quote, self.i + 1)
        self._emit(TokenKind.ATTRIBUTE_VALUE, decode_entities(self.text[self.i + 1:end]))
        self.i = end + 1


def tokenize(text: str) -> list[Token]:
    """Convert raw XML text into a flat sequence of tokens.

    Raises:
        ParseSyntaxError: On EOF while a delimiter (``?>``, ``>``, a closing
            quote, ``]]>``, ``-->``) is pending, on an unknown ``<!``
            construct, or on a ``>`` outside any tag.
    """
    tokens = _Scanner(text).run()
    logger.debug("Tokenized %d characters into %d tokens", len(text), len(tokens))
    return tokens
