"""Lenient integer parsing for money and counters typed into forms."""
import re

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_amount(value) -> int:
    """
    Parse a money amount the way the booking form does: the leading integer
    of the input, '150000abc' -> 150000, '' / None / 'abc' -> 0.
    Amounts are never negative; negative input counts as 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        try:
            n = int(value)
        except (OverflowError, ValueError):  # inf / nan
            return 0
        return max(0, n)
    m = _LEADING_INT.match(str(value))
    if not m:
        return 0
    return max(0, int(m.group(1)))


def to_int_safe(value, default: int = 0) -> int:
    """Convert stored numeric fields to int; return `default` if invalid."""
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default
