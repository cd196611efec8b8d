"""Line-total and sum arithmetic shared by the editor and the API."""

from __future__ import annotations

import math
from typing import Any, Iterable


def to_number(value: Any) -> float:
    """Coerce form input to a finite number; blanks, garbage, inf and nan become 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip() or 0)
        except ValueError:
            return 0.0
    return number if math.isfinite(number) else 0.0


def compute_line_total(quantity: float, price: float) -> float:
    return quantity * price


def sum_totals(values: Iterable[float]) -> float:
    s = 0.0
    for v in values:
        s += v
    return s
