"""Display formatting for calculator results."""

import math

from mortgage_tools.constants import FREQUENCY_LABEL


def fmt_currency(value: float, symbol: str = "$") -> str:
    """1234567.891 -> $1,234,567.89"""
    if value < 0:
        return f"-{symbol}{abs(value):,.2f}"
    return f"{symbol}{value:,.2f}"


def fmt_percent(value: float) -> str:
    """Fraction to percentage: 0.3456 -> 34.56%"""
    return f"{value * 100:.2f}%"


def fmt_rate(value: float) -> str:
    """Annual rate in percent: 5.59 -> 5.59%"""
    return f"{value:.2f}%"


def fmt_frequency(frequency) -> str:
    key = getattr(frequency, "value", frequency)
    return FREQUENCY_LABEL.get(key, str(key).title())


def parse_input_number(value: str) -> float:
    """Parse a form number, ignoring thousands separators. Blank or invalid -> 0."""
    try:
        number = float(str(value).replace(",", "").strip())
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0
