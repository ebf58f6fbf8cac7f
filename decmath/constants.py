"""Named decimal constants used by the math engine.

Every value here is built once at import time and must only be read. The
algorithms copy a constant before using it as a mutable working value.

Euler's number and ln(10) are computed with exact integer series in fixed
point, carrying guard digits, then rounded to CONSTANT_DIGITS decimal places.
CONSTANT_DIGITS sits above the default maximum working precision so that
pow() never asks for more digits than the constants hold.
"""

from __future__ import annotations

from decmath.dec import ROUND_HALF_UP, Dec

__all__ = [
    "CONSTANT_DIGITS",
    "DECIMAL_ZERO",
    "DECIMAL_ONE",
    "DECIMAL_TWO",
    "DECIMAL_THREE",
    "DECIMAL_EIGHT",
    "DECIMAL_HALF",
    "DECIMAL_ONE_EIGHTH",
    "DECIMAL_ZERO_PT_NINE",
    "DECIMAL_ONE_PT_ONE",
    "DECIMAL_CBRT_C1",
    "DECIMAL_CBRT_C2",
    "DECIMAL_CBRT_C3",
    "DECIMAL_E",
    "DECIMAL_LN10",
    "DIGITS_TO_BITS_RATIO",
]

# Decimal places kept for the transcendental constants
CONSTANT_DIGITS = 600

# Extra fixed-point digits absorbing truncation in the series below
_GUARD_DIGITS = 10

# log2(10): bits per decimal digit, used to estimate digit counts from bit lengths
DIGITS_TO_BITS_RATIO = 3.321928094887362


def _compute_e(digits: int) -> Dec:
    """e = sum(1/k!) in fixed point with `digits` decimal places."""
    one = 10 ** (digits + _GUARD_DIGITS)
    total = one
    term = one
    k = 1
    while term:
        term //= k
        total += term
        k += 1
    return Dec().round(Dec(total, digits + _GUARD_DIGITS), digits, ROUND_HALF_UP)


def _atanh_inv(k: int, one: int) -> int:
    """atanh(1/k) = 1/k + 1/(3k^3) + 1/(5k^5) + ... as a fixed-point integer."""
    k_squared = k * k
    power = one // k
    total = power
    n = 3
    while power:
        power //= k_squared
        total += power // n
        n += 2
    return total


def _compute_ln10(digits: int) -> Dec:
    """ln(10) = 3*ln(2) + ln(5/4), with ln(2) = 2*atanh(1/3) and ln(5/4) = 2*atanh(1/9)."""
    one = 10 ** (digits + _GUARD_DIGITS)
    ln10 = 2 * (3 * _atanh_inv(3, one) + _atanh_inv(9, one))
    return Dec().round(Dec(ln10, digits + _GUARD_DIGITS), digits, ROUND_HALF_UP)


DECIMAL_ZERO = Dec(0, 0)
DECIMAL_ONE = Dec(1, 0)
DECIMAL_TWO = Dec(2, 0)
DECIMAL_THREE = Dec(3, 0)
DECIMAL_EIGHT = Dec(8, 0)
DECIMAL_HALF = Dec(5, 1)
DECIMAL_ONE_EIGHTH = Dec(125, 3)

# Range-reduction bounds for log(): the series converges fast inside [0.9, 1.1]
DECIMAL_ZERO_PT_NINE = Dec(9, 1)
DECIMAL_ONE_PT_ONE = Dec(11, 1)

# Quadratic approximation of cbrt(v) on [0.125, 1] (Turkowski):
#   cbrt(v) ~= (C1 * v + C2) * v + C3
DECIMAL_CBRT_C1 = Dec(-46946116, 8)
DECIMAL_CBRT_C2 = Dec(1072302, 6)
DECIMAL_CBRT_C3 = Dec(3812513, 7)

DECIMAL_E = _compute_e(CONSTANT_DIGITS)
DECIMAL_LN10 = _compute_ln10(CONSTANT_DIGITS)
