"""Sizing string evaluation.

Dialog widths and vertical offsets are stored as CSS-like strings so plugin
authors can reuse the values they already know (``"600px"``, ``"15vh"``,
``"50%"``). ``resolve_length`` maps such a string onto pixels for a given
viewport; it is pure so layout rules can be tested headless.

Supported units: ``px`` (or a bare number), ``%`` (relative to the axis
reference), ``vw`` and ``vh``. Anything else resolves to ``None`` and the
caller falls back to its default.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

__all__ = ["Length", "parse_length", "resolve_length"]

_LENGTH_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*(px|%|vw|vh)?\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class Length:
    value: float
    unit: str  # "px" | "%" | "vw" | "vh"


def parse_length(text: str) -> Optional[Length]:
    if not isinstance(text, str):
        return None
    match = _LENGTH_RE.match(text)
    if not match:
        return None
    unit = (match.group(2) or "px").lower()
    return Length(float(match.group(1)), unit)


def resolve_length(
    text: str, *, reference: int, viewport_width: int, viewport_height: int
) -> Optional[int]:
    """Return pixels for ``text`` or ``None`` when it cannot be parsed.

    ``reference`` is the size ``%`` is relative to (viewport width for widths,
    viewport height for vertical offsets).
    """
    length = parse_length(text)
    if length is None:
        return None
    if length.unit == "px":
        px = length.value
    elif length.unit == "%":
        px = reference * length.value / 100.0
    elif length.unit == "vw":
        px = viewport_width * length.value / 100.0
    else:
        px = viewport_height * length.value / 100.0
    return max(0, int(round(px)))
