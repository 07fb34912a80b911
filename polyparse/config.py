"""
Configuration models and YAML I/O for polyparse.

This module defines the Pydantic models for per-format parser options and
for the fallback (auto-detect) parser, plus helpers to load and save the
fallback configuration as ``polyparse.yaml``.

Key models:
- NoOptions: Options model for formats that accept no options.
- CsvOptions: ``header`` / ``require_delimiter`` switches for the CSV parser.
- FallbackConfig: Retry order, CSV options and error suppression used by
  ``polyparse.auto.parse_any()``.

Key functions:
- load_config(path) -> FallbackConfig: Load and validate from YAML.
- save_config(config, path): Serialize to YAML.
- default_config() -> FallbackConfig: The built-in defaults.

Why Pydantic + YAML:
- Pydantic gives strict validation and clear error messages for options
  passed as plain dicts.
- YAML keeps the fallback config human-editable.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from polyparse.exceptions import ConfigValidationError
from polyparse.formats import FALLBACK_ORDER, DataFormat

logger = logging.getLogger(__name__)


class NoOptions(BaseModel):
    """Options model for parsers that take no options (rejects any key)."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class CsvOptions(BaseModel):
    """Options recognized by the CSV parser."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    header: bool = Field(
        False, description="If True, the first row supplies record keys"
    )
    require_delimiter: bool = Field(
        False,
        description=(
            "If True, reject input in which no row has more than one field "
            "(used by the fallback parser so free text is not a 1x1 table)"
        ),
    )


class FallbackConfig(BaseModel):
    """Settings for the auto-detecting fallback parser.

    Maps 1:1 to polyparse.yaml.
    """

    model_config = ConfigDict(extra="forbid")

    order: list[DataFormat] = Field(
        default_factory=lambda: list(FALLBACK_ORDER),
        description="Formats retried, in order, after the detected one fails",
    )
    csv: CsvOptions = Field(
        default_factory=lambda: CsvOptions(require_delimiter=True),
        description="Options passed to the CSV parser during auto-detection",
    )
    suppress_errors: bool = Field(
        False, description="If True, return None instead of raising when all formats fail"
    )

    @field_validator("order")
    @classmethod
    def _check_order(cls, order: list[DataFormat]) -> list[DataFormat]:
        """Validate that the retry order is non-empty and has no duplicates."""
        if not order:
            raise ValueError("Fallback order must name at least one format.")
        seen: set[DataFormat] = set()
        for fmt in order:
            if fmt in seen:
                raise ValueError(f"Format '{fmt.value}' appears twice in the fallback order.")
            seen.add(fmt)
        return order


def default_config() -> FallbackConfig:
    """Return the built-in fallback configuration."""
    return FallbackConfig()


def load_config(path: str | Path) -> FallbackConfig:
    """Load and validate polyparse.yaml into a FallbackConfig model.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigValidationError: If the file is empty or fails validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise ConfigValidationError(f"Config file is empty: {path}")
    try:
        config = FallbackConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigValidationError(f"Invalid config in {path}:\n{exc}") from exc
    logger.info("Loaded config from %s", path)
    return config


def save_config(config: FallbackConfig, path: str | Path) -> None:
    """Serialize a FallbackConfig to YAML with a header comment."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("# polyparse configuration\n")
        f.write("# Edit this file to change the auto-detection retry order.\n\n")
        yaml.dump(
            data,
            f,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )
    logger.info("Saved config to %s", path)
