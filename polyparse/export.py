"""
Serializers and file exporter for polyparse.

Turns the normalized ``data`` view of a ``StructuredData`` value back into
text (JSON, YAML, CSV, XML) or a pandas DataFrame, and writes any of those
to disk.

Tabular rules (CSV, DataFrame, Parquet):
- A list of rows (lists of scalars) is written without a header.
- A list of records (dicts) is written with the union of their keys as the
  header; missing cells become empty strings. Nested records are flattened
  with ``pandas.json_normalize`` for the DataFrame view only.
- Anything else raises ``UnsupportedViewError``.

XML rules:
- XML-origin values are written from their ``XmlDocument`` tree.
- Other values must be a single-key mapping (the root element). Mapping
  keys become child elements, ``$value`` becomes text, and list items are
  written as repeated elements named by the singular of their key
  (``books`` -> ``book``, otherwise ``item``).
"""

from __future__ import annotations

import html
import json
import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pandas as pd
import yaml

from polyparse.exceptions import ExportError, UnsupportedViewError
from polyparse.formats import DataFormat, format_for_suffix
from polyparse.xml.projector import VALUE_KEY
from polyparse.xml.tree import ROOT, XmlDocument, XmlNode

if TYPE_CHECKING:
    from polyparse.structured import StructuredData

logger = logging.getLogger(__name__)

_XML_NAME = re.compile(r"^[A-Za-z_][\w.\-:]*$")
_SCALARS = (str, int, float, bool, type(None))


# ---------------------------------------------------------------------------
# JSON / YAML
# ---------------------------------------------------------------------------

def to_json_text(data: Any, indent: int | None = None) -> str:
    return json.dumps(data, indent=indent, ensure_ascii=False)


def to_yaml_text(data: Any) -> str:
    return yaml.safe_dump(
        data,
        allow_unicode=True,
        default_flow_style=False,
        sort_keys=False,
    )


# ---------------------------------------------------------------------------
# Tabular (CSV / DataFrame)
# ---------------------------------------------------------------------------

def _tabular_kind(data: Any) -> str:
    """Classify *data* as ``"rows"`` or ``"records"``.

    Raises:
        UnsupportedViewError: If *data* is neither.
    """
    if not isinstance(data, list):
        raise UnsupportedViewError(
            f"Tabular views need a list of rows or records, got {type(data).__name__}"
        )
    if all(isinstance(row, list) for row in data):
        return "rows"
    if all(isinstance(row, dict) for row in data):
        return "records"
    raise UnsupportedViewError(
        "Tabular views need every element to be a row (list) or every "
        "element to be a record (dict)"
    )


def to_frame(data: Any) -> pd.DataFrame:
    """Build a DataFrame from a list of rows or records."""
    if _tabular_kind(data) == "rows":
        return pd.DataFrame(data, dtype=object)
    return pd.json_normalize(data)


def to_csv_text(data: Any) -> str:
    """Write a list of rows or flat records as CSV with CRLF line endings."""
    kind = _tabular_kind(data)
    for row in data:
        cells = row if kind == "rows" else list(row.values())
        if not all(isinstance(cell, _SCALARS) for cell in cells):
            raise UnsupportedViewError("CSV cells must be scalars, found a nested value")
    if not data:
        return ""
    df = pd.DataFrame(data, dtype=object)
    return df.to_csv(
        index=False,
        header=(kind == "records"),
        lineterminator="\r\n",
        na_rep="",
    )


# ---------------------------------------------------------------------------
# XML
# ---------------------------------------------------------------------------

def _check_name(name: Any) -> str:
    name = str(name)
    if not _XML_NAME.match(name):
        raise UnsupportedViewError(f"'{name}' is not a valid XML element name")
    return name


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return html.escape(str(value), quote=False)


def _singular(key: str) -> str:
    return key[:-1] if len(key) > 1 and key.endswith("s") else "item"


def _write_element(tag: str, value: Any, out: list[str]) -> None:
    tag = _check_name(tag)
    if isinstance(value, dict):
        out.append(f"<{tag}>")
        for key, child in value.items():
            if key == VALUE_KEY:
                out.append(_text(child))
            else:
                _write_element(key, child, out)
        out.append(f"</{tag}>")
    elif isinstance(value, list):
        out.append(f"<{tag}>")
        item_tag = _singular(tag)
        for child in value:
            _write_element(item_tag, child, out)
        out.append(f"</{tag}>")
    elif value is None or value == "":
        out.append(f"<{tag}/>")
    else:
        out.append(f"<{tag}>{_text(value)}</{tag}>")


def to_xml_text(data: Any) -> str:
    """Write a single-key mapping as an XML document."""
    if not isinstance(data, dict) or len(data) != 1:
        raise UnsupportedViewError(
            "XML output needs a mapping with exactly one key (the root element)"
        )
    (tag, value), = data.items()
    out: list[str] = []
    _write_element(tag, value, out)
    return "".join(out)


def _open_node(node: XmlNode, out: list[str]) -> bool:
    """Write the start of *node*; return False when it was self-closing."""
    attrs = "".join(
        f' {name}="{html.escape(value, quote=True)}"'
        for name, value in node.attributes.items()
    )
    if not node.children and not node.text:
        out.append(f"<{node.tag}{attrs}/>")
        return False
    out.append(f"<{node.tag}{attrs}>")
    if node.text:
        out.append(html.escape(node.text, quote=False))
    return True


def document_to_xml(document: XmlDocument) -> str:
    """Serialize an ``XmlDocument`` back to XML text."""
    out: list[str] = []
    # Entries are node indices to open, or closing tags to emit
    stack: list[int | str] = [ROOT]
    while stack:
        entry = stack.pop()
        if isinstance(entry, str):
            out.append(entry)
            continue
        node = document.node(entry)
        if _open_node(node, out):
            stack.append(f"</{node.tag}>")
            stack.extend(reversed(node.children))
    return "".join(out)


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------

def export_structured(
    value: StructuredData,
    path: Path,
    fmt: DataFormat | str | None = None,
) -> Path:
    """Write *value* to *path* in *fmt* (or the format implied by the suffix).

    The parent directory is created if it does not exist.

    Raises:
        ExportError: If the format is unsupported or the write fails.
    """
    is_parquet = (fmt is None and path.suffix.lower() == ".parquet") or (
        isinstance(fmt, str) and fmt.lower() == "parquet"
    )
    try:
        if not is_parquet:
            fmt = DataFormat.coerce(fmt) if fmt is not None else format_for_suffix(path)
            text = value.serialize(fmt)
    except (TypeError, ValueError) as exc:
        # UnknownFormatError and UnsupportedViewError included
        raise ExportError(f"Cannot export to {path.name}: {exc}") from exc

    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        if is_parquet:
            df = value.to_frame()
            # Parquet columns need string names
            df.columns = [str(c) for c in df.columns]
            df.to_parquet(path, index=False, engine="pyarrow")
        else:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(text)
    except UnsupportedViewError as exc:
        raise ExportError(f"Cannot export to {path.name}: {exc}") from exc
    except Exception as exc:
        raise ExportError(f"Failed to write {path.name}: {exc}") from exc

    logger.info(
        "Exported %s value -> %s",
        value.origin_format.value,
        path.name,
    )
    return path
