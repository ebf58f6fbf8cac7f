"""Transcendental operations on Dec: logarithms, exponential and power.

Data-dependent failures (a non-positive logarithm argument, zero raised to a
negative power, a working precision above the configured maximum) raise
DecimalMathError subclasses that callers are expected to handle. The output
location is never written before such an error can occur.

Every function takes the output location as the keyword-only ``out``
argument. When out is None a new Dec is allocated; otherwise out is
overwritten and returned. out may be the same object as any input.
"""

from __future__ import annotations

import math

import structlog

from decmath.algebraic import sqrt
from decmath.config import DEFAULT_MATH_CONFIG, MathConfig
from decmath.constants import (
    DECIMAL_E,
    DECIMAL_LN10,
    DECIMAL_ONE,
    DECIMAL_ONE_PT_ONE,
    DECIMAL_TWO,
    DECIMAL_ZERO_PT_NINE,
    DIGITS_TO_BITS_RATIO,
)
from decmath.convergence import ConvergenceLoop
from decmath.dec import ROUND_DOWN, ROUND_HALF_UP, ROUND_UP, Dec
from decmath.errors import (
    ArgumentTooLargeError,
    DomainError,
    LogDomainError,
    PowNegativeNonIntegerError,
    PowZeroNegativeError,
)

__all__ = ["log", "log10", "log_n", "integer_power", "exp", "pow"]

logger = structlog.get_logger()

# Extra digits carried by exp() and pow() beyond the target scale
_GUARD_DIGITS = 2


# =============================================================================
# Logarithms
# =============================================================================


def log(x: Dec, scale: int, *, out: Dec | None = None, config: MathConfig | None = None) -> Dec:
    """Compute the natural logarithm of x rounded (half-up) to scale.

    Uses the Taylor series
        r = (x - 1) / (x + 1)
        ln(x) = 2 * (r + r^3/3 + r^5/5 + ...)
    which converges quickly for 0.9 < x < 1.1. Other inputs are first
    square-rooted into that range; each square root halves the logarithm, so
    the sum is multiplied by 2 for every reduction.

    All intermediate steps run at scale + config.log_guard_digits to absorb
    the rounding error of the nested square roots and divisions.

    Args:
        x: Positive argument
        scale: Digits after the decimal point in the result
        out: Optional result location; may alias x
        config: Iteration limits (default: DEFAULT_MATH_CONFIG)

    Returns:
        out (or a new Dec) holding ln(x)

    Raises:
        LogDomainError: If x <= 0
    """
    config = config or DEFAULT_MATH_CONFIG
    if x.sign() <= 0:
        raise LogDomainError(f"natural log of non-positive value: {x}", operation="log", value=x.copy())

    working_scale = scale + config.log_guard_digits
    reduced = x.copy()

    # ln(x) = -ln(1/x). Square roots of values below one lose relative
    # precision at a fixed scale; their reciprocals do not.
    inverted = reduced.cmp(DECIMAL_ZERO_PT_NINE) < 0
    if inverted:
        reduced.quo_round(DECIMAL_ONE, reduced, working_scale, ROUND_HALF_UP)

    # log_b(sqrt(x)) = log_b(x) / 2
    factor = Dec(2, 0)
    reductions = 0
    while reduced.cmp(DECIMAL_ZERO_PT_NINE) < 0 or reduced.cmp(DECIMAL_ONE_PT_ONE) > 0:
        sqrt(reduced, working_scale, out=reduced, config=config)
        factor.mul(factor, DECIMAL_TWO)
        reductions += 1
    if reductions:
        logger.debug("log_range_reduced", sqrt_count=reductions, working_scale=working_scale)

    numerator = Dec().sub(reduced, DECIMAL_ONE)
    denominator = Dec().add(reduced, DECIMAL_ONE)
    r = Dec().quo_round(numerator, denominator, working_scale, ROUND_HALF_UP)

    z = r.copy()
    power = r.copy()
    r_squared = Dec().mul(r, r)  # the series uses odd powers only
    r_squared.round(r_squared, working_scale, ROUND_HALF_UP)
    odd = Dec()
    term = Dec()

    loop = ConvergenceLoop(
        "log", z, scale, config.log_min_iterations, max_iterations=config.max_iterations
    )
    while True:
        odd.set_unscaled(2 * loop.iterations + 3)  # 3, 5, 7, ...
        power.mul(power, r_squared)
        power.round(power, working_scale, ROUND_HALF_UP)
        term.quo_round(power, odd, working_scale, ROUND_HALF_UP)  # r^n / n
        z.add(z, term)
        if loop.done(z):
            break

    # Undo the range reduction.
    z.mul(z, factor)
    if inverted:
        z.neg(z)

    if out is None:
        out = Dec()
    return out.round(z, scale, ROUND_HALF_UP)


def log10(x: Dec, scale: int, *, out: Dec | None = None, config: MathConfig | None = None) -> Dec:
    """Compute log base 10 of x as ln(x) / ln(10), rounded to scale.

    ln(x) is computed with one extra digit before the final division.

    Raises:
        LogDomainError: If x <= 0
    """
    ln_x = log(x, scale + 1, config=config)
    if out is None:
        out = Dec()
    return out.quo_round(ln_x, DECIMAL_LN10, scale, ROUND_HALF_UP)


def log_n(
    x: Dec,
    n: Dec,
    scale: int,
    *,
    out: Dec | None = None,
    config: MathConfig | None = None,
) -> Dec:
    """Compute log base n of x as ln(x) / ln(n), rounded to scale.

    Both logarithms are computed with one extra digit before the final
    division. out may alias x, n or both.

    Raises:
        LogDomainError: If x <= 0, n <= 0, or ln(n) is zero at the working
            scale (n is one, or too close to one to divide by)
    """
    if out is n:
        n = n.copy()

    ln_x = log(x, scale + 1, config=config)
    ln_n = log(n, scale + 1, config=config)
    if ln_n.sign() == 0:
        raise LogDomainError(
            f"logarithm base is one or too close to one: {n}", operation="log_n", value=n.copy()
        )

    if out is None:
        out = Dec()
    return out.quo_round(ln_x, ln_n, scale, ROUND_HALF_UP)


# =============================================================================
# Exponentials
# =============================================================================


def _log10_magnitude(x: Dec) -> float:
    """log10|x| for a non-zero x."""
    return math.log10(abs(x.unscaled)) - x.scale


def integer_power(x: Dec, y: int, scale: int, *, out: Dec | None = None) -> Dec:
    """Compute x^y for an integer exponent by repeated squaring.

    Negative exponents invert the base first and raise 1/x to |y|.

    The base and the running product are rounded after every multiplication.
    Their scale covers the target scale, the digits of |y| (errors add up once
    per multiplication) and, when the result is larger than one, its integer
    digits, since rounding errors are relative to the result. Squaring a
    high-precision constant such as e would otherwise double the mantissa
    length on every step.

    Args:
        x: Base (copied, never mutated)
        y: Integer exponent
        scale: Digits after the decimal point in the result
        out: Optional result location; may alias x

    Returns:
        out (or a new Dec) holding x^y

    Raises:
        DomainError: If x is zero and y is negative
    """
    negative = y < 0
    if negative:
        if x.sign() == 0:
            raise DomainError(f"cannot raise zero to a negative power: {y}")
        y = -y

    working_scale = scale + _GUARD_DIGITS + len(str(y))
    if x.sign() != 0:
        result_digits = _log10_magnitude(x) * y
        if negative:
            result_digits = -result_digits
        if result_digits > 0:
            working_scale += math.ceil(result_digits)

    base = x.copy()
    if negative:
        base.quo_round(DECIMAL_ONE, base, working_scale, ROUND_HALF_UP)

    z = DECIMAL_ONE.copy()
    while y > 0:
        if y & 1:
            z.mul(z, base)
            z.round(z, working_scale, ROUND_HALF_UP)
        y >>= 1
        if y:
            base.mul(base, base)
            base.round(base, working_scale, ROUND_HALF_UP)

    if out is None:
        out = Dec()
    return out.round(z, scale, ROUND_HALF_UP)


def _small_exp(z: Dec, y: Dec, scale: int, config: MathConfig) -> Dec:
    """Multiply z in place by e^y using the Taylor series; only for |y| < 1.

    z * e^y = z + z*y + z*y^2/2! + z*y^3/3! + ...
    """
    n = Dec()
    term = z.copy()
    loop = ConvergenceLoop("exp", z, scale, 1, max_iterations=config.max_iterations)
    while True:
        n.add(n, DECIMAL_ONE)
        term.mul(term, y)
        term.quo_round(term, n, scale + _GUARD_DIGITS, ROUND_HALF_UP)
        z.add(z, term)
        if loop.done(z):
            break
    return z.round(z, scale, ROUND_HALF_UP)


def exp(n: Dec, scale: int, *, out: Dec | None = None, config: MathConfig | None = None) -> Dec:
    """Compute e^n rounded (half-up) to scale.

    n is split into an integer part x (truncated toward zero) and a
    fractional remainder y = n - x with |y| < 1, so that
        e^n = e^x * e^y
    e^x comes from integer_power on Euler's number and e^y from a Taylor
    series. Arguments whose result rounds to zero at scale return zero
    without evaluating the power.

    Args:
        n: Exponent
        scale: Digits after the decimal point in the result
        out: Optional result location; may alias n
        config: Iteration limits (default: DEFAULT_MATH_CONFIG)

    Returns:
        out (or a new Dec) holding e^n

    Raises:
        DomainError: If the integer part of n does not fit a signed 64-bit integer
    """
    config = config or DEFAULT_MATH_CONFIG
    working_scale = scale + _GUARD_DIGITS

    x = Dec().round(n, 0, ROUND_DOWN)
    y = Dec().sub(n, x)

    # e^-(3 * (scale + 3)) < 10^-(scale + 1) for every non-negative scale.
    if x.cmp(Dec(-3 * (max(scale, 0) + 3), 0)) < 0:
        logger.debug("exp_underflow", exponent=str(n), scale=scale)
        if out is None:
            out = Dec()
        return out.set_unscaled(0).set_scale(scale)

    try:
        integer = x.unscaled_int64()
    except OverflowError as err:
        raise DomainError(f"exponent integer part out of range: {n}") from err

    if out is None:
        out = Dec()
    integer_power(DECIMAL_E, integer, working_scale + _GUARD_DIGITS, out=out)
    return _small_exp(out, y, scale, config)


def _result_digits(x: Dec, y: Dec) -> float:
    """Estimate an upper bound on the number of integer digits of x^y.

    log10|x| is bounded from the bit length b of the mantissa:
        (b - 1) / log2(10) - scale <= log10|x| < b / log2(10) - scale
    and multiplied by y rounded away from zero. A positive y takes the upper
    bound and a negative y the lower one, so the product never falls short.
    """
    y_up = Dec().round(y, 0, ROUND_UP).unscaled
    if y_up == 0:
        return 0.0
    bits = x.bit_length()
    if y_up < 0:
        bits -= 1
    x_digits = bits / DIGITS_TO_BITS_RATIO - x.scale
    if x_digits == 0:
        return 0.0
    try:
        return x_digits * y_up
    except OverflowError:
        return math.copysign(math.inf, x_digits) * (1 if y_up > 0 else -1)


def pow(
    x: Dec,
    y: Dec,
    scale: int,
    *,
    out: Dec | None = None,
    config: MathConfig | None = None,
) -> Dec:
    """Compute x^y as e^(y * ln|x|), rounded (half-up) to scale.

    Exponent precision: computing ln|x| with scale k gives ln|x| +/- 10^-k,
    an error of y * 10^-k in the exponent and a multiplicative error of about
    1 + y * 10^-k in the result. The additive error x^y * y * 10^-k stays
    under 10^-scale when k is scale plus the number of integer digits of
    x^y, estimated as the integer digits of x times y.

    Special cases:
        0^0 = 1, 0^y = 0 for y > 0

    Args:
        x: Base
        y: Exponent (must be an integer when x is negative)
        scale: Digits after the decimal point in the result
        out: Optional result location; may alias x or y
        config: Precision and iteration limits (default: DEFAULT_MATH_CONFIG)

    Returns:
        out (or a new Dec) holding x^y

    Raises:
        PowZeroNegativeError: If x is zero and y is negative
        PowNegativeNonIntegerError: If x is negative and y is not an integer
        ArgumentTooLargeError: If the working scale would exceed config.max_precision
    """
    config = config or DEFAULT_MATH_CONFIG
    target_scale = scale + _GUARD_DIGITS

    x_sign = x.sign()
    if x_sign == 0:
        y_sign = y.sign()
        if y_sign < 0:
            raise PowZeroNegativeError(
                "zero raised to a negative power is undefined", operation="pow", value=y.copy()
            )
        if out is None:
            out = Dec()
        return out.set_unscaled(1 if y_sign == 0 else 0).set_scale(0)

    negative = x_sign < 0
    if negative and not y.is_integer():
        raise PowNegativeNonIntegerError(
            "a negative number raised to a non-integer power yields a complex result",
            operation="pow",
            value=y.copy(),
        )

    # exponent precision = scale + <integer digits of x> * y
    extra = _result_digits(x, y)
    exponent_scale = target_scale
    if extra > 0:
        exponent_scale += math.ceil(min(extra, config.max_precision + 1))
    if exponent_scale > config.max_precision:
        raise ArgumentTooLargeError(
            f"argument too large: {x} ^ {y} needs a working scale above {config.max_precision}",
            operation="pow",
            value=x.copy(),
        )
    logger.debug("pow_working_scale", scale=scale, exponent_scale=exponent_scale)

    odd_power = (Dec().round(y, 0, ROUND_DOWN).unscaled & 1) == 1

    tmp = Dec().abs(x)
    log(tmp, exponent_scale, out=tmp, config=config)
    tmp.mul(tmp, y)
    exp(tmp, exponent_scale, out=tmp, config=config)

    if negative and odd_power:
        tmp.neg(tmp)

    if out is None:
        out = Dec()
    return out.round(tmp, scale, ROUND_HALF_UP)
