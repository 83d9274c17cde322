"""Numeric helpers shared by the learning engine"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Number = Union[int, float, Decimal]


def to_decimal(value: Number) -> Decimal:
    """
    Convert a number to Decimal through its string form.

    Going through str() keeps 0.7 as Decimal('0.7') instead of the binary
    expansion of the float, so weighted sums land exactly on .5 boundaries.
    """
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_half_up(value: Number) -> int:
    """
    Round to the nearest integer, halves away from zero.

    Python's round() uses banker's rounding (round(2.5) == 2); the learning
    policy rounds 2.5 up to 3.

    Examples:
        >>> round_half_up(2.5)
        3
        >>> round_half_up(Decimal('3.49'))
        3
    """
    return int(to_decimal(value).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def clamp(value: Number, lower: Number, upper: Number) -> Number:
    """Clamp value into [lower, upper]"""
    return max(lower, min(upper, value))
