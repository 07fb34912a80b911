"""
Format detection for polyparse.

Classifies raw text with cheap, ordered heuristics. The result is only a
prediction: the fallback parser still verifies it by actually parsing, and
tries the other formats when the prediction is wrong.

Detection order (first match wins, on the trimmed text):
1. JSON -- starts and ends with matching ``{}`` or ``[]``.
2. XML  -- starts with ``<`` and contains a start/end-tag-like substring.
3. CSV  -- has a newline and a ``,`` or ``;`` and no bracket or angle
   characters.
4. YAML -- has a ``key: value`` line or a ``- item`` line.
5. None -- nothing matched.
"""

from __future__ import annotations

import logging
import re

from polyparse.formats import DataFormat

logger = logging.getLogger(__name__)

_XML_TAG = re.compile(r"</?[a-zA-Z][\w\-.]*[^<>]*>")
_CSV_DELIMITER = re.compile(r"[,;]")
_CSV_FORBIDDEN = re.compile(r"[{}\[\]<>]")
_YAML_KEY = re.compile(r"^[a-zA-Z0-9_-]+:\s", re.MULTILINE)
_YAML_LIST_ITEM = re.compile(r"^\s*-\s+[a-zA-Z0-9_-]+", re.MULTILINE)


def detect_format(text: str) -> DataFormat | None:
    """Guess the format of *text*, or return None if no heuristic matches."""
    text = text.strip()

    if (text.startswith("{") and text.endswith("}")) or (
        text.startswith("[") and text.endswith("]")
    ):
        detected = DataFormat.JSON
    elif text.startswith("<") and _XML_TAG.search(text):
        detected = DataFormat.XML
    elif "\n" in text and _CSV_DELIMITER.search(text) and not _CSV_FORBIDDEN.search(text):
        detected = DataFormat.CSV
    elif _YAML_KEY.search(text) or _YAML_LIST_ITEM.search(text):
        detected = DataFormat.YAML
    else:
        detected = None

    logger.debug("Detected format: %s", detected.value if detected else None)
    return detected
