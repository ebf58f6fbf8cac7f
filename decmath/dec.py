"""Scaled decimal primitive.

Dec is a mutable arbitrary-precision decimal stored as an unscaled integer and
a scale, meaning ``unscaled * 10**-scale``. Example: 1.5 is stored as
``Dec(15, 1)``, and 1500 may be stored as ``Dec(1500, 0)`` or ``Dec(15, -2)``.

Arithmetic methods write into the receiver and return it, so calls chain and
intermediate values can be reused without allocating:

    z = Dec()
    z.mul(x, y).add(z, w)        # z = x * y + w

The receiver may be the same object as any operand. Operand values are read
before the receiver is written.
"""

from __future__ import annotations

from decimal import ROUND_DOWN, ROUND_HALF_UP, ROUND_UP, Decimal, InvalidOperation

__all__ = [
    "Dec",
    "ROUND_DOWN",
    "ROUND_HALF_UP",
    "ROUND_UP",
    "INT64_MIN",
    "INT64_MAX",
]

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_ROUNDING_MODES = (ROUND_DOWN, ROUND_HALF_UP, ROUND_UP)


def _div_round(num: int, den: int, rounding: str) -> int:
    """Integer quotient num / den rounded with the given mode.

    ROUND_DOWN truncates toward zero, ROUND_UP rounds away from zero and
    ROUND_HALF_UP rounds to nearest with ties away from zero. Python's //
    floors toward -inf, so the quotient is computed on magnitudes and the
    sign applied afterwards.
    """
    if den == 0:
        raise ZeroDivisionError("Dec division by zero")
    if den < 0:
        num, den = -num, -den

    quotient, remainder = divmod(abs(num), den)
    if remainder:
        if rounding == ROUND_UP:
            quotient += 1
        elif rounding == ROUND_HALF_UP:
            if 2 * remainder >= den:
                quotient += 1
    return -quotient if num < 0 else quotient


def _check_rounding(rounding: str) -> None:
    if rounding not in _ROUNDING_MODES:
        raise ValueError(f"Unsupported rounding mode: {rounding}")


def _aligned(x: Dec, y: Dec) -> tuple[int, int, int]:
    """Unscaled values of x and y brought to their common (larger) scale."""
    scale = max(x._scale, y._scale)
    xu = x._unscaled * 10 ** (scale - x._scale)
    yu = y._unscaled * 10 ** (scale - y._scale)
    return xu, yu, scale


class Dec:
    """Arbitrary-precision decimal with an explicit scale.

    Dec defines equality but is mutable, so it is unhashable.

    Attributes:
        unscaled: The integer mantissa
        scale: Number of digits after the decimal point (may be negative)
    """

    __slots__ = ("_unscaled", "_scale")
    __hash__ = None  # type: ignore[assignment]  # Unhashable since we define __eq__

    def __init__(self, unscaled: int = 0, scale: int = 0) -> None:
        """Create a Dec equal to ``unscaled * 10**-scale``.

        Raises:
            TypeError: If unscaled or scale is not an int
        """
        if not isinstance(unscaled, int) or isinstance(unscaled, bool):
            raise TypeError(f"Dec requires int unscaled value, got {type(unscaled).__name__}")
        if not isinstance(scale, int) or isinstance(scale, bool):
            raise TypeError(f"Dec requires int scale, got {type(scale).__name__}")
        self._unscaled = unscaled
        self._scale = scale

    # --- Construction ---

    @classmethod
    def from_int(cls, i: int) -> Dec:
        """Create from an integer at scale 0."""
        return cls(i, 0)

    @classmethod
    def from_decimal(cls, d: Decimal) -> Dec:
        """Create from a finite Decimal, keeping its exponent as the scale.

        Raises:
            ValueError: If d is infinite or NaN
        """
        if not d.is_finite():
            raise ValueError(f"Dec requires a finite Decimal, got {d}")
        sign, digits, exponent = d.as_tuple()
        unscaled = int("".join(str(digit) for digit in digits) or "0")
        if sign:
            unscaled = -unscaled
        return cls(unscaled, -int(exponent))

    @classmethod
    def from_str(cls, s: str) -> Dec:
        """Parse a decimal string such as "-12.5" or "1e-3".

        Raises:
            ValueError: If the string is not a finite decimal number
        """
        try:
            d = Decimal(s.strip())
        except InvalidOperation as err:
            raise ValueError(f"Invalid decimal string: '{s}'") from err
        return cls.from_decimal(d)

    def copy(self) -> Dec:
        """Return an independent Dec with the same unscaled value and scale."""
        return Dec(self._unscaled, self._scale)

    # --- Accessors ---

    @property
    def unscaled(self) -> int:
        """The integer mantissa."""
        return self._unscaled

    @property
    def scale(self) -> int:
        """Digits after the decimal point."""
        return self._scale

    def bit_length(self) -> int:
        """Bit length of the absolute unscaled value."""
        return abs(self._unscaled).bit_length()

    def unscaled_int64(self) -> int:
        """The unscaled value, validated to fit a signed 64-bit integer.

        Raises:
            OverflowError: If the unscaled value is outside int64 range
        """
        if not INT64_MIN <= self._unscaled <= INT64_MAX:
            raise OverflowError(f"Unscaled value does not fit int64: {self._unscaled}")
        return self._unscaled

    def sign(self) -> int:
        """Return -1, 0 or 1."""
        if self._unscaled > 0:
            return 1
        if self._unscaled < 0:
            return -1
        return 0

    def is_integer(self) -> bool:
        """True if the value has no fractional part."""
        if self._scale <= 0:
            return True
        return self._unscaled % 10**self._scale == 0

    def cmp(self, other: Dec) -> int:
        """Compare values (ignoring scale): -1 if self < other, 0 if equal, 1 if greater."""
        xu, yu, _ = _aligned(self, other)
        return (xu > yu) - (xu < yu)

    # --- In-place setters ---

    def set(self, x: Dec) -> Dec:
        """Set self to x and return self."""
        self._unscaled = x._unscaled
        self._scale = x._scale
        return self

    def set_unscaled(self, unscaled: int) -> Dec:
        """Replace the mantissa, keeping the scale."""
        self._unscaled = unscaled
        return self

    def set_scale(self, scale: int) -> Dec:
        """Replace the scale, keeping the mantissa."""
        self._scale = scale
        return self

    # --- In-place arithmetic ---

    def add(self, x: Dec, y: Dec) -> Dec:
        """Set self to x + y at the larger of the two scales."""
        xu, yu, scale = _aligned(x, y)
        self._unscaled = xu + yu
        self._scale = scale
        return self

    def sub(self, x: Dec, y: Dec) -> Dec:
        """Set self to x - y at the larger of the two scales."""
        xu, yu, scale = _aligned(x, y)
        self._unscaled = xu - yu
        self._scale = scale
        return self

    def mul(self, x: Dec, y: Dec) -> Dec:
        """Set self to x * y exactly (scale is the sum of the operand scales)."""
        unscaled = x._unscaled * y._unscaled
        scale = x._scale + y._scale
        self._unscaled = unscaled
        self._scale = scale
        return self

    def quo_round(self, x: Dec, y: Dec, scale: int, rounding: str) -> Dec:
        """Set self to x / y rounded to the given scale.

        Raises:
            ZeroDivisionError: If y is zero
            ValueError: If rounding is not ROUND_DOWN, ROUND_HALF_UP or ROUND_UP
        """
        _check_rounding(rounding)
        shift = scale - x._scale + y._scale
        if shift >= 0:
            num, den = x._unscaled * 10**shift, y._unscaled
        else:
            num, den = x._unscaled, y._unscaled * 10**-shift
        self._unscaled = _div_round(num, den, rounding)
        self._scale = scale
        return self

    def round(self, x: Dec, scale: int, rounding: str) -> Dec:
        """Set self to x rounded (or zero-extended) to the given scale.

        Raises:
            ValueError: If rounding is not ROUND_DOWN, ROUND_HALF_UP or ROUND_UP
        """
        _check_rounding(rounding)
        if scale >= x._scale:
            unscaled = x._unscaled * 10 ** (scale - x._scale)
        else:
            unscaled = _div_round(x._unscaled, 10 ** (x._scale - scale), rounding)
        self._unscaled = unscaled
        self._scale = scale
        return self

    def abs(self, x: Dec) -> Dec:
        """Set self to |x|."""
        self._unscaled = abs(x._unscaled)
        self._scale = x._scale
        return self

    def neg(self, x: Dec) -> Dec:
        """Set self to -x."""
        self._unscaled = -x._unscaled
        self._scale = x._scale
        return self

    # --- Conversion ---

    def to_decimal(self) -> Decimal:
        """Convert to an exact Decimal."""
        return Decimal(str(self))

    def __str__(self) -> str:
        digits = str(abs(self._unscaled))
        if self._scale <= 0:
            text = "0" if self._unscaled == 0 else digits + "0" * -self._scale
        else:
            digits = digits.rjust(self._scale + 1, "0")
            text = f"{digits[: -self._scale]}.{digits[-self._scale :]}"
        return f"-{text}" if self._unscaled < 0 else text

    def __repr__(self) -> str:
        return f"Dec({self._unscaled}, {self._scale})"

    # --- Comparison operations ---

    def __eq__(self, other: object) -> bool:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return self.cmp(rhs) == 0

    def __lt__(self, other: object) -> bool:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return self.cmp(rhs) < 0

    def __le__(self, other: object) -> bool:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return self.cmp(rhs) <= 0

    def __gt__(self, other: object) -> bool:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return self.cmp(rhs) > 0

    def __ge__(self, other: object) -> bool:
        rhs = _coerce(other)
        if rhs is None:
            return NotImplemented
        return self.cmp(rhs) >= 0


def _coerce(other: object) -> Dec | None:
    """Return other as a Dec when it is a Dec or a plain int, else None."""
    if isinstance(other, Dec):
        return other
    if isinstance(other, int) and not isinstance(other, bool):
        return Dec(other, 0)
    return None
