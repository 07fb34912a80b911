"""
Custom exception hierarchy for polyparse.

Why a custom hierarchy:
- Callers can catch a whole family (``PolyparseError``) or one failure kind
  (e.g., ``ParseSyntaxError`` vs ``AllFormatsFailedError``).
- The format errors also subclass the matching builtin (``SyntaxError``,
  ``TypeError``, ``ValueError``) so generic handlers keep working.
"""

from __future__ import annotations

import json


class PolyparseError(Exception):
    """Base exception for all polyparse errors."""


class ParseSyntaxError(PolyparseError, SyntaxError):
    """Raised when text is malformed for the format it is parsed as.

    Examples: unbalanced XML tags, an unterminated CSV quote, an invalid
    JSON token. Never recovered silently by a single-format parser.
    """


class UnsupportedViewError(PolyparseError, TypeError):
    """Raised when a view or serialization cannot represent the data.

    For example, ``to_csv()`` on a nested mapping, or ``to_xml()`` on a
    top-level list.
    """


class UnknownFormatError(PolyparseError, ValueError):
    """Raised when a format name does not match any supported format."""


class ConfigValidationError(PolyparseError):
    """Raised when parser options or a polyparse.yaml file fail validation."""


class ExportError(PolyparseError):
    """Raised when a structured value cannot be written to disk."""


class AllFormatsFailedError(PolyparseError):
    """Raised by the fallback parser when every attempted format failed.

    Attributes:
        errors: Mapping of format name -> that format's error message,
            in the order the formats were attempted.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        super().__init__(
            "Failed to parse data in any supported format: "
            f"{json.dumps(self.errors)}"
        )
