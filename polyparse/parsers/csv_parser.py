"""
CSV parser for polyparse.

An RFC4180-style tokenizer:
- Fields are separated by commas.
- A field may be wrapped in double quotes; inside quotes a doubled quote
  (``""``) is a literal quote and any other character, raw newlines
  included, is field content.
- ``\\r\\n``, ``\\r`` and ``\\n`` end a row outside quotes (CRLF counts once).

The input is trimmed before scanning, so leading/trailing blank lines never
produce empty rows.

``finalize()`` then keeps the rows as lists of strings, or (with
``header=True``) turns them into records keyed by the first row.
"""

from __future__ import annotations

import logging

from polyparse.config import CsvOptions
from polyparse.exceptions import ParseSyntaxError
from polyparse.formats import DataFormat
from polyparse.parsers.base import BaseParser

logger = logging.getLogger(__name__)

Row = list[str]
Record = dict[str, str]


def parse_rows(text: str) -> list[Row]:
    """Split CSV text into rows of fields.

    Raises:
        ParseSyntaxError: ``"Data cannot be empty"`` for empty or
            whitespace-only input; ``"Unexpected EOF while inside quoted
            field"`` for an unterminated quote.
    """
    text = text.strip()
    if not text:
        raise ParseSyntaxError("Data cannot be empty")

    rows: list[Row] = []
    row: Row = []
    field: list[str] = []
    in_quotes = False
    n = len(text)
    i = 0

    while i < n:
        c = text[i]
        if in_quotes:
            if c == '"':
                if i + 1 < n and text[i + 1] == '"':
                    field.append('"')
                    i += 2
                    continue
                in_quotes = False
            else:
                field.append(c)
            i += 1
            continue

        if c == '"':
            in_quotes = True
        elif c == ",":
            row.append("".join(field))
            field = []
        elif c == "\r" or c == "\n":
            if c == "\r" and i + 1 < n and text[i + 1] == "\n":
                i += 1
            row.append("".join(field))
            rows.append(row)
            row = []
            field = []
        else:
            field.append(c)
        i += 1

    if in_quotes:
        raise ParseSyntaxError("Unexpected EOF while inside quoted field")

    row.append("".join(field))
    rows.append(row)
    return rows


def finalize(rows: list[Row], header: bool) -> list[Row] | list[Record]:
    """Project rows into records when *header* is set.

    The first row supplies the keys (an empty header cell becomes
    ``field<index>``); missing trailing cells are filled with ``""`` and
    cells beyond the header are dropped.
    """
    if not rows or not header:
        return rows

    keys = [name or f"field{idx}" for idx, name in enumerate(rows[0])]
    records: list[Record] = []
    for cols in rows[1:]:
        records.append({
            key: cols[idx] if idx < len(cols) else ""
            for idx, key in enumerate(keys)
        })
    return records


class CsvParser(BaseParser):
    """Parser for CSV text. Options: ``CsvOptions``."""

    format = DataFormat.CSV
    options_model = CsvOptions

    def _parse(self, text: str, options: CsvOptions) -> list[Row] | list[Record]:
        rows = parse_rows(text)
        if options.require_delimiter and all(len(row) == 1 for row in rows):
            raise ParseSyntaxError("No delimiter found; input is not tabular")
        logger.debug("CSV: %d rows (header=%s)", len(rows), options.header)
        return finalize(rows, options.header)
