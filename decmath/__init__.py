"""Arbitrary-precision decimal math.

This package provides elementary operations over scaled decimals:
- Dec: mutable decimal stored as (unscaled int, scale)
- sqrt, cbrt, mod: algebraic operations
- log, log10, log_n, exp, pow, integer_power: transcendental operations
- decimal_from_float, float_from_decimal: native float conversion
"""

from decmath.algebraic import cbrt, mod, sqrt
from decmath.config import DEFAULT_MATH_CONFIG, MathConfig
from decmath.convergence import ConvergenceLoop
from decmath.dec import ROUND_DOWN, ROUND_HALF_UP, ROUND_UP, Dec
from decmath.errors import (
    ArgumentTooLargeError,
    ConvergenceError,
    ConversionError,
    DecimalMathError,
    DomainError,
    LogDomainError,
    ModuloByZeroError,
    PowNegativeNonIntegerError,
    PowZeroNegativeError,
)
from decmath.floats import decimal_from_float, float_from_decimal
from decmath.transcendental import exp, integer_power, log, log10, log_n, pow

__all__ = [
    # Primitive
    "Dec",
    "ROUND_DOWN",
    "ROUND_HALF_UP",
    "ROUND_UP",
    # Operations
    "sqrt",
    "cbrt",
    "mod",
    "log",
    "log10",
    "log_n",
    "exp",
    "pow",
    "integer_power",
    "decimal_from_float",
    "float_from_decimal",
    # Iteration and configuration
    "ConvergenceLoop",
    "MathConfig",
    "DEFAULT_MATH_CONFIG",
    # Errors
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
