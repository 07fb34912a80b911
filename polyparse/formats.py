"""
The closed set of data formats polyparse understands.

``DataFormat`` is used everywhere a format is named: as the origin tag of a
``StructuredData`` value, as the key of the parser registry, and as the
entries of the fallback order.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from polyparse.exceptions import UnknownFormatError


class DataFormat(str, Enum):
    """Textual formats a structured value can originate from."""

    JSON = "json"
    XML = "xml"
    CSV = "csv"
    YAML = "yaml"
    TOML = "toml"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def coerce(cls, value: DataFormat | str) -> DataFormat:
        """Return the member for *value* (a member or a case-insensitive name).

        Raises:
            UnknownFormatError: If *value* names no supported format.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnknownFormatError(
                f"Unsupported format: '{value}'. "
                f"Supported formats: {[f.value for f in cls]}"
            ) from None


# Retry order used by the fallback parser. TOML is reachable directly only.
FALLBACK_ORDER: tuple[DataFormat, ...] = (
    DataFormat.JSON,
    DataFormat.XML,
    DataFormat.CSV,
    DataFormat.YAML,
)

_SUFFIXES = {
    ".json": DataFormat.JSON,
    ".xml": DataFormat.XML,
    ".csv": DataFormat.CSV,
    ".yaml": DataFormat.YAML,
    ".yml": DataFormat.YAML,
    ".toml": DataFormat.TOML,
}


def format_for_suffix(path: str | Path) -> DataFormat:
    """Map a file suffix to a format.

    Raises:
        UnknownFormatError: If the suffix is not a known format extension.
    """
    suffix = Path(path).suffix.lower()
    try:
        return _SUFFIXES[suffix]
    except KeyError:
        raise UnknownFormatError(
            f"Cannot infer format from file suffix '{suffix}' ({path}). "
            f"Known suffixes: {sorted(_SUFFIXES)}"
        ) from None
