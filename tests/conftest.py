"""
Shared test fixtures and sample documents for polyparse tests.

The larger shared sample (LIBRARY_XML) lives here; small samples are
defined inline in each test module. ``write_sample`` writes text to
``tmp_path`` for tests that need a real file.
"""

from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Sample documents -- edit here if new shared samples are needed
# ---------------------------------------------------------------------------
LIBRARY_XML = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE html>
<?process instruction?>
<!-- Main library data for 2025 -->

<library>
  <!-- First book entry -->
  <book id="b1" available="true">
    <title>XML &amp; Data Structures</title>
    <author><![CDATA[Seniru <Pasan>]]></author>
    <published year="2024" />
    <tags>
      <tag>education</tag>
      <tag>&lt;xml&gt;</tag>
      <tag>&#169; copyright</tag>
    </tags>
  </book>

  <!-- Second book entry -->
  <book id="b2" available="false">
    <title><![CDATA[Another Book & Notes]]></title>
    <author>Jane Doe</author>
    <published year="2023" />
  </book>
</library>"""


@pytest.fixture()
def library_xml() -> str:
    return LIBRARY_XML


@pytest.fixture()
def write_sample(tmp_path):
    """Return a helper that writes *text* to ``tmp_path / name``."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (file-based round trips)",
    )
