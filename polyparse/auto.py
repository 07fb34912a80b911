"""
Fallback (auto-detecting) parser for polyparse.

Orchestrates the detector and the format parsers as a small state machine:

    IDLE -> DETECTING -> TRYING(fmt) -> SUCCESS
                             |
                             +-> NEXT_FORMAT -> TRYING(next) ...
                             |
                             +-> ALL_FAILED  (raise, or None when suppressed)

1. ``detect_format()`` predicts a format; that format is tried first and its
   failure is discarded (the prediction was only advisory).
2. Every remaining format of ``FallbackConfig.order`` (json -> xml -> csv ->
   yaml by default) is tried once, in order.
3. The first success wins. If every attempt fails, the per-format messages
   are aggregated into one ``AllFormatsFailedError``.

Each attempt is folded as an ``Attempt`` result value; only the attempt
itself catches parser errors. All state lives in a ``FallbackRun`` created
per call, so concurrent calls share nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto

from polyparse.config import FallbackConfig, default_config
from polyparse.detect import detect_format
from polyparse.exceptions import AllFormatsFailedError, PolyparseError
from polyparse.formats import DataFormat
from polyparse.parsers.base import FileSource, get_parser, read_text
from polyparse.structured import StructuredData

logger = logging.getLogger(__name__)


class AutoState(Enum):
    """States of a fallback run."""

    IDLE = auto()
    DETECTING = auto()
    TRYING = auto()
    NEXT_FORMAT = auto()
    SUCCESS = auto()
    ALL_FAILED = auto()


@dataclass(frozen=True)
class Attempt:
    """Outcome of parsing the text as one format: a value or an error message."""

    format: DataFormat
    value: StructuredData | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.value is not None


def attempt(fmt: DataFormat, text: str, config: FallbackConfig) -> Attempt:
    """Try one format and capture the result instead of raising."""
    options = config.csv if fmt is DataFormat.CSV else None
    try:
        value = get_parser(fmt).parse_text(text, options)
    except PolyparseError as exc:
        return Attempt(fmt, error=str(exc))
    return Attempt(fmt, value=value)


@dataclass
class FallbackRun:
    """One execution of the fallback state machine over one text."""

    text: str
    config: FallbackConfig
    state: AutoState = AutoState.IDLE
    predicted: DataFormat | None = None
    attempts: list[Attempt] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    def plan(self) -> list[DataFormat]:
        """Formats to try, in order: the prediction first, then the rest."""
        rest = [fmt for fmt in self.config.order if fmt is not self.predicted]
        return ([self.predicted] if self.predicted is not None else []) + rest

    def run(self) -> StructuredData | None:
        """Drive the state machine; return the first success or None."""
        self.state = AutoState.DETECTING
        self.predicted = detect_format(self.text)

        for fmt in self.plan():
            self.state = AutoState.TRYING
            result = attempt(fmt, self.text, self.config)
            self.attempts.append(result)

            if result.ok:
                self.state = AutoState.SUCCESS
                logger.info("Parsed input as %s", fmt.value)
                return result.value

            if fmt is self.predicted:
                logger.debug(
                    "Predicted format %s failed (%s); trying the others",
                    fmt.value, result.error,
                )
            else:
                self.errors[fmt.value] = result.error or ""
            self.state = AutoState.NEXT_FORMAT

        self.state = AutoState.ALL_FAILED
        logger.debug("All formats failed: %s", self.errors)
        return None


def parse_any(
    text: str,
    suppress_errors: bool = False,
    config: FallbackConfig | None = None,
) -> StructuredData | None:
    """Parse *text* in whichever supported format accepts it.

    Args:
        text: The complete input text.
        suppress_errors: If True, return None instead of raising when every
            format fails. ``config.suppress_errors`` has the same effect.
        config: Fallback settings; defaults to ``default_config()``.

    Returns:
        The first successful ``StructuredData``, or None under suppression.

    Raises:
        AllFormatsFailedError: If every attempted format failed.
    """
    config = config or default_config()
    run = FallbackRun(text, config)
    value = run.run()
    if value is not None:
        return value
    if suppress_errors or config.suppress_errors:
        logger.debug("Suppressing fallback failure")
        return None
    raise AllFormatsFailedError(run.errors)


def load_any(
    source: FileSource,
    suppress_errors: bool = False,
    config: FallbackConfig | None = None,
    encoding: str = "utf-8",
) -> StructuredData | None:
    """Read a file and parse it with ``parse_any()``.

    Under suppression an unreadable file also yields None.

    Raises:
        OSError: If the file cannot be read (without suppression).
        AllFormatsFailedError: If every attempted format failed.
    """
    suppress = suppress_errors or (config is not None and config.suppress_errors)
    try:
        text = read_text(source, encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        if suppress:
            logger.warning("Could not read %s: %s", source, exc)
            return None
        raise
    return parse_any(text, suppress_errors=suppress, config=config)


class AutoParser:
    """Reusable holder of a ``FallbackConfig``.

    Holds no per-call state; every call builds its own ``FallbackRun``.
    """

    def __init__(self, config: FallbackConfig | None = None) -> None:
        self.config = config or default_config()

    def __repr__(self) -> str:
        order = [fmt.value for fmt in self.config.order]
        return f"AutoParser(order={order})"

    def parse_string(self, text: str, suppress_errors: bool = False) -> StructuredData | None:
        return parse_any(text, suppress_errors=suppress_errors, config=self.config)

    def parse_file(
        self,
        source: FileSource,
        suppress_errors: bool = False,
        encoding: str = "utf-8",
    ) -> StructuredData | None:
        return load_any(source, suppress_errors=suppress_errors, config=self.config, encoding=encoding)
