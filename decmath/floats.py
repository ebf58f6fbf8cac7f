"""Conversion between native floats and Dec.

decimal_from_float is exact with respect to the float's shortest round-trip
representation: parsing str(result) as a float gives back the original value
bit for bit.
"""

from __future__ import annotations

import math
from decimal import Decimal

from decmath.dec import Dec
from decmath.errors import ConversionError, DomainError

__all__ = ["decimal_from_float", "float_from_decimal"]


def decimal_from_float(f: float, *, out: Dec | None = None) -> Dec:
    """Convert a finite float to a Dec.

    The shortest round-trip text of f (``repr``) is split into sign, digits
    and decimal exponent, and the exponent becomes the scale. Example:
    1.5e-7 becomes ``Dec(15, 8)``, 1e22 becomes ``Dec(1, -22)``.

    Args:
        f: Value to convert
        out: Optional Dec to overwrite with the result

    Returns:
        out (or a new Dec) holding the exact value

    Raises:
        DomainError: If f is infinite or NaN
    """
    if math.isinf(f):
        raise DomainError(f"cannot create a decimal from an infinite float: {f}")
    if math.isnan(f):
        raise DomainError("cannot create a decimal from a NaN float")

    if out is None:
        out = Dec()
    return out.set(Dec.from_decimal(Decimal(repr(float(f)))))


def float_from_decimal(d: Dec) -> float:
    """Convert a Dec to the nearest float.

    Values too small for a float round to zero; values too large for one fail.

    Raises:
        ConversionError: If d is outside the finite float range
    """
    text = str(d)
    result = float(text)
    if math.isinf(result):
        raise ConversionError(
            f"decimal value out of float range: {text}",
            operation="float_from_decimal",
            value=d.copy(),
        )
    return result
