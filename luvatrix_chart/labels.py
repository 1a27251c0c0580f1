from __future__ import annotations

from decimal import Decimal, InvalidOperation

import numpy as np


def format_grid_value(value: float, *, decimals: int = 6) -> str:
    """Compact label for a grid bound: `10`, `-2.5`, `1.2500e+07`."""

    if not np.isfinite(value):
        return str(value)
    abs_v = abs(value)
    if abs_v != 0 and (abs_v >= 1e6 or abs_v < 1e-6):
        return f"{value:.4e}"

    d = Decimal(str(value))
    quant = Decimal("1").scaleb(-decimals)
    try:
        q = d.quantize(quant)
    except InvalidOperation:
        q = d
    out = format(q, "f")
    # Keep integer zeros (10, 20); trim only fractional ones.
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out
