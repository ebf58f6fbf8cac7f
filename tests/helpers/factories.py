"""Factory and comparison helpers for decimal tests.

Usage:
    from tests.helpers import D, assert_close, reference_ln

    x = D("1.5")                 # Dec(15, 1)
    assert_close(sqrt(x, 20), reference_sqrt("1.5", 20), ulps=1)
"""

import decimal
from decimal import ROUND_HALF_UP, Decimal

from decmath.dec import Dec

# Enough precision for every reference value used in the tests
_REFERENCE_CONTEXT = decimal.Context(prec=700)


def D(value: str | int) -> Dec:
    """Create a Dec from a decimal string or an int."""
    if isinstance(value, int):
        return Dec.from_int(value)
    return Dec.from_str(value)


def _quantize(d: Decimal, scale: int) -> Dec:
    return Dec.from_decimal(d.quantize(Decimal(1).scaleb(-scale), rounding=ROUND_HALF_UP))


def reference_ln(value: str, scale: int) -> Dec:
    """ln(value) from the decimal module, rounded half-up to scale."""
    with decimal.localcontext(_REFERENCE_CONTEXT):
        return _quantize(Decimal(value).ln(), scale)


def reference_exp(value: str, scale: int) -> Dec:
    """e^value from the decimal module, rounded half-up to scale."""
    with decimal.localcontext(_REFERENCE_CONTEXT):
        return _quantize(Decimal(value).exp(), scale)


def reference_sqrt(value: str, scale: int) -> Dec:
    """sqrt(value) from the decimal module, rounded half-up to scale."""
    with decimal.localcontext(_REFERENCE_CONTEXT):
        return _quantize(Decimal(value).sqrt(), scale)


def assert_close(actual: Dec, expected: Dec, ulps: int = 1) -> None:
    """Assert |actual - expected| is at most `ulps` units in the last place of expected."""
    delta = Dec().sub(actual, expected)
    delta.abs(delta)
    tolerance = Dec(ulps, expected.scale)
    assert delta <= tolerance, f"{actual} differs from {expected} by {delta} (> {tolerance})"


def reference_pow(x: str, y: str, scale: int) -> Dec:
    """x^y from the decimal module, rounded half-up to scale."""
    with decimal.localcontext(_REFERENCE_CONTEXT):
        return _quantize(Decimal(x) ** Decimal(y), scale)
