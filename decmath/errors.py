"""Error classes for decimal math operations.

Two tiers:
- Invariant violations (DomainError, ConvergenceError) signal programming
  errors: a negative square root, a non-finite float, a zero modulus, or a
  loop that failed to converge. They are not meant to be caught mid-computation.
- Recoverable errors (DecimalMathError and subclasses) depend on input data
  the caller cannot fully control ahead of time, such as the logarithm of a
  non-positive value that came out of a division. Callers are expected to
  catch and report them.
"""

from __future__ import annotations

from typing import Any


class DomainError(ValueError):
    """Argument outside the mathematically defined domain (programming error)."""

    pass


class ModuloByZeroError(DomainError, ZeroDivisionError):
    """Modulo with a zero divisor."""

    pass


class ConvergenceError(RuntimeError):
    """Iterative algorithm exceeded its iteration ceiling.

    Indicates a bug in an algorithm or the constant table, never bad input.
    """

    pass


class DecimalMathError(ArithmeticError):
    """Base error for recoverable, data-dependent failures.

    Attributes:
        operation: Name of the failing operation (e.g. "log", "pow")
        value: The offending operand, if any
    """

    def __init__(self, message: str, *, operation: str, value: Any = None) -> None:
        super().__init__(message)
        self.operation = operation
        self.value = value


class LogDomainError(DecimalMathError):
    """Logarithm of a non-positive value, or with a base of one."""

    pass


class PowZeroNegativeError(DecimalMathError):
    """Zero raised to a negative power is undefined."""

    pass


class PowNegativeNonIntegerError(DecimalMathError):
    """A negative number raised to a non-integer power yields a complex result."""

    pass


class ArgumentTooLargeError(DecimalMathError):
    """Required working precision exceeds the configured maximum."""

    pass


class ConversionError(DecimalMathError):
    """Decimal value does not fit the native float range."""

    pass


__all__ = [
    "DomainError",
    "ModuloByZeroError",
    "ConvergenceError",
    "DecimalMathError",
    "LogDomainError",
    "PowZeroNegativeError",
    "PowNegativeNonIntegerError",
    "ArgumentTooLargeError",
    "ConversionError",
]
