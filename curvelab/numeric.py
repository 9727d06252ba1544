"""
Numeric coercion and display for table cells.

``parse_number`` is the only way a cell value becomes a float anywhere in
the engine.
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional

from .config import FORMAT_PRECISION

_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")


def parse_number(value: Any) -> Optional[float]:
    """Coerce a loosely-typed cell value to a finite float.

    Returns None when the value is missing, blank, not a plain decimal
    literal, or not finite. A decimal comma (``"1,5"``) is accepted.
    """
    if value is None:
        return None
    try:
        # ints past the interpreter digit limit cannot be stringified
        text = str(value).strip()
    except ValueError:
        return None
    if not text:
        return None
    text = text.replace(",", ".", 1)
    if not _NUMBER_RE.match(text):
        return None
    number = float(text)
    return number if math.isfinite(number) else None


def format_number(value: Any, precision: int = FORMAT_PRECISION) -> str:
    """Render a number for reports.

    Very large or very small magnitudes switch to scientific notation;
    missing and NaN values render as an em dash placeholder.
    """
    if value is None:
        return "—"
    try:
        number = float(value)
    except (TypeError, ValueError):
        return "—"
    if math.isnan(number):
        return "—"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    magnitude = abs(number)
    if magnitude >= 1e6 or (magnitude != 0 and magnitude <= 1e-6):
        return f"{number:.{precision - 1}e}"
    return f"{number:.{precision}g}"
