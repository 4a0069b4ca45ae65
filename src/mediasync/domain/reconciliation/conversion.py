"""Scalar conversions from remote wire values into domain values."""

from __future__ import annotations

import math
import re
from datetime import UTC, datetime
from typing import Final

TICKS_PER_SECOND: Final[int] = 10_000_000

_ISO_FORMATS: Final[tuple[str, ...]] = (
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
)
# strptime's %f accepts at most six digits; servers send seven
_FRACTION: Final[re.Pattern[str]] = re.compile(r"(\.\d{6})\d+")


def ticks_to_seconds(ticks: float | None) -> float:
    """Convert 100ns ticks to seconds; anything unusable becomes ``0.0``."""

    if ticks is None or ticks <= 0:
        return 0.0
    try:
        seconds = ticks / TICKS_PER_SECOND
    except OverflowError:
        return 0.0
    if not math.isfinite(seconds):
        return 0.0
    return float(seconds)


def parse_iso8601(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp, with fractional seconds first, then without.

    Returns an aware UTC datetime, or ``None`` when ``value`` is empty or
    matches neither format.
    """

    if not value:
        return None
    text = _FRACTION.sub(r"\1", value.strip())
    if text.endswith(("Z", "z")):
        text = f"{text[:-1]}+00:00"
    for fmt in _ISO_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return parsed.astimezone(UTC)
    return None
