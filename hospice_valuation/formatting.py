"""Display formatting for currency, percentages, and multiples."""

from __future__ import annotations

import math


def _missing(value) -> bool:
    if value is None:
        return True
    try:
        return math.isnan(float(value))
    except (TypeError, ValueError):
        return True


def format_currency(value, decimals: int = 0) -> str:
    if _missing(value):
        return "$0"
    v = float(value)
    sign = "-" if v < 0 and round(abs(v), decimals) != 0 else ""
    return f"{sign}${abs(v):,.{decimals}f}"


def format_percent(value, decimals: int = 2) -> str:
    if _missing(value):
        return f"{0:.{decimals}f}%"
    return f"{float(value) * 100:.{decimals}f}%"


def format_multiple(value, decimals: int = 2) -> str:
    if _missing(value):
        return f"{0:.{decimals}f}x"
    return f"{float(value):.{decimals}f}x"


def format_number(value, decimals: int = 2) -> str:
    if _missing(value):
        return "0"
    return f"{float(value):,.{decimals}f}"
