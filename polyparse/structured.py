"""
The uniform result container for every parser.

A ``StructuredData`` value pairs the origin format with the format-native
parsed payload:

    json         -> the decoded Python object
    yaml / toml  -> the decoded object (may hold date/time objects)
    csv          -> list of rows, or list of header-keyed records
    xml          -> the ``XmlDocument`` node tree

``data`` derives a JSON-compatible view from the payload on every access
and never hands out the payload itself, so the value stays immutable after
construction. Serialization (``to_json`` ... ``to_xml``), the pandas view
(``to_frame``) and ``export()`` are built on ``data``, except XML-origin
values which serialize back from their node tree.
"""

from __future__ import annotations

import base64
import datetime as dt
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from polyparse import export as exporter
from polyparse.exceptions import UnsupportedViewError
from polyparse.formats import DataFormat
from polyparse.xml.projector import project
from polyparse.xml.tree import XmlDocument

if TYPE_CHECKING:
    import pandas as pd

logger = logging.getLogger(__name__)


_CONTAINERS = (dict, list, tuple, set, frozenset)


def _jsonable_scalar(value: Any) -> Any:
    if isinstance(value, (dt.datetime, dt.date, dt.time)):
        return value.isoformat()
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    return value


def _empty_like(value: Any) -> dict | list:
    return {} if isinstance(value, dict) else []


def _jsonable(value: Any) -> Any:
    """Return a JSON-compatible copy of a decoded payload.

    Date/time values (TOML, YAML timestamps) become ISO-8601 strings, bytes
    (YAML ``!!binary``) become base64 text and sets become lists. The walk
    uses an explicit stack, so nesting depth is not bounded by recursion.
    """
    if not isinstance(value, _CONTAINERS):
        return _jsonable_scalar(value)

    result = _empty_like(value)
    stack = [(value, result)]
    while stack:
        source, target = stack.pop()
        if isinstance(source, dict):
            items = source.items()
        elif isinstance(source, (set, frozenset)):
            items = enumerate(sorted(source, key=str))
        else:
            items = enumerate(source)
        for key, item in items:
            if isinstance(item, _CONTAINERS):
                copied = _empty_like(item)
                stack.append((item, copied))
            else:
                copied = _jsonable_scalar(item)
            if isinstance(target, dict):
                target[_jsonable_scalar(key)] = copied
            else:
                target.append(copied)
    return result


@dataclass(frozen=True)
class StructuredData:
    """A parsed value tagged with the format it came from.

    Attributes:
        origin_format: The format the text was parsed as.
        raw: The format-native payload. Treat as read-only; use ``data``
            for a normalized, caller-owned copy.
    """

    origin_format: DataFormat
    raw: Any

    def __post_init__(self) -> None:
        object.__setattr__(self, "origin_format", DataFormat.coerce(self.origin_format))
        if self.origin_format is DataFormat.XML and not isinstance(self.raw, XmlDocument):
            raise UnsupportedViewError(
                f"XML values must wrap an XmlDocument, got {type(self.raw).__name__}"
            )

    def __repr__(self) -> str:
        return f"StructuredData(origin_format={self.origin_format.value!r}, raw={self.raw!r})"

    # -- Views ----------------------------------------------------------------

    @property
    def data(self) -> Any:
        """JSON-compatible view of the payload, recomputed on each access."""
        fmt = self.origin_format
        if fmt is DataFormat.XML:
            return project(self.raw)
        if fmt in (DataFormat.JSON, DataFormat.CSV, DataFormat.YAML, DataFormat.TOML):
            return _jsonable(self.raw)
        raise UnsupportedViewError(f"No data view for format '{fmt.value}'")

    def to_frame(self) -> pd.DataFrame:
        """Tabular view as a pandas DataFrame.

        Raises:
            UnsupportedViewError: If the data is not a list of rows or records.
        """
        return exporter.to_frame(self.data)

    # -- Serialization --------------------------------------------------------

    def to_json(self, indent: int | None = None) -> str:
        return exporter.to_json_text(self.data, indent=indent)

    def to_yaml(self) -> str:
        return exporter.to_yaml_text(self.data)

    def to_csv(self) -> str:
        """Serialize tabular data as RFC4180 CSV (CRLF line endings)."""
        return exporter.to_csv_text(self.data)

    def to_xml(self) -> str:
        """Serialize as XML.

        XML-origin values are written from their node tree, so attributes,
        text and element order survive. Other values must be a mapping with
        exactly one key, which becomes the root element.
        """
        if self.origin_format is DataFormat.XML:
            return exporter.document_to_xml(self.raw)
        return exporter.to_xml_text(self.data)

    def serialize(self, fmt: DataFormat | str) -> str:
        """Serialize to the named format."""
        fmt = DataFormat.coerce(fmt)
        if fmt is DataFormat.JSON:
            return self.to_json(indent=2)
        if fmt is DataFormat.YAML:
            return self.to_yaml()
        if fmt is DataFormat.CSV:
            return self.to_csv()
        if fmt is DataFormat.XML:
            return self.to_xml()
        raise UnsupportedViewError(f"Serialization to '{fmt.value}' is not supported")

    def export(self, path: str | Path, fmt: DataFormat | str | None = None) -> Path:
        """Write the value to *path*; format from *fmt* or the file suffix.

        ``.parquet`` (or ``fmt="parquet"``) writes the tabular view with
        pyarrow.

        Returns:
            The path that was written.

        Raises:
            ExportError: If the format is unsupported or writing fails.
        """
        return exporter.export_structured(self, Path(path), fmt)
