"""Algebraic operations on Dec: square root, cube root and modulo.

Every function takes the output location as the keyword-only ``out``
argument. When out is None a new Dec is allocated; otherwise out is
overwritten and returned. out may be the same object as any input; inputs
are copied before out is first written.
"""

from __future__ import annotations

import structlog

from decmath.config import DEFAULT_MATH_CONFIG, MathConfig
from decmath.constants import (
    DECIMAL_CBRT_C1,
    DECIMAL_CBRT_C2,
    DECIMAL_CBRT_C3,
    DECIMAL_EIGHT,
    DECIMAL_HALF,
    DECIMAL_ONE,
    DECIMAL_ONE_EIGHTH,
    DECIMAL_THREE,
    DECIMAL_TWO,
)
from decmath.convergence import ConvergenceLoop
from decmath.dec import ROUND_DOWN, ROUND_HALF_UP, Dec
from decmath.errors import DomainError, ModuloByZeroError

__all__ = ["sqrt", "cbrt", "mod"]

logger = structlog.get_logger()

# Extra digits carried by the Newton iterations beyond the target scale
_NEWTON_GUARD_DIGITS = 2


def mod(x: Dec, y: Dec, *, out: Dec | None = None) -> Dec:
    """Compute x % y with a truncating quotient.

    Formula:
        x % y = x - y * trunc(x / y)

    The result takes the sign of x (mod(-7, 3) == -1, mod(7, -3) == 1),
    matching truncating rather than floored division.

    Args:
        x: Dividend
        y: Divisor
        out: Optional result location; may alias x, y or both

    Returns:
        out (or a new Dec) holding the remainder

    Raises:
        ModuloByZeroError: If y is zero
    """
    if y.sign() == 0:
        raise ModuloByZeroError(f"modulo by zero: {x} % 0")

    if out is None:
        out = Dec()
    else:
        if out is x:
            x = x.copy()
        if out is y:
            y = y.copy()

    out.quo_round(x, y, 0, ROUND_DOWN)
    return out.sub(x, out.mul(out, y))


def sqrt(x: Dec, scale: int, *, out: Dec | None = None, config: MathConfig | None = None) -> Dec:
    """Compute the square root of x rounded (half-up) to scale.

    Uses Newton's method starting from x / 2:
        x_{n+1} = 1/2 * (x_n + x / x_n)

    Args:
        x: Non-negative radicand
        scale: Digits after the decimal point in the result
        out: Optional result location; may alias x
        config: Iteration limits (default: DEFAULT_MATH_CONFIG)

    Returns:
        out (or a new Dec) holding sqrt(x)

    Raises:
        DomainError: If x is negative
    """
    config = config or DEFAULT_MATH_CONFIG
    if x.sign() < 0:
        raise DomainError(f"square root of negative number: {x}")

    if out is None:
        out = Dec()
    elif out is x:
        x = x.copy()

    if x.sign() == 0:
        return out.set_unscaled(0).set_scale(0)

    z = out
    z.mul(x, DECIMAL_HALF)

    tmp = Dec()
    loop = ConvergenceLoop("sqrt", z, scale, 1, max_iterations=config.max_iterations)
    while True:
        tmp.quo_round(x, z, scale + _NEWTON_GUARD_DIGITS, ROUND_HALF_UP)  # x / x_n
        tmp.add(tmp, z)  # x_n + x / x_n
        z.mul(tmp, DECIMAL_HALF)
        if loop.done(z):
            break

    return z.round(z, scale, ROUND_HALF_UP)


def cbrt(x: Dec, scale: int, *, out: Dec | None = None, config: MathConfig | None = None) -> Dec:
    """Compute the cube root of x rounded (half-up) to scale.

    Negative inputs return -cbrt(-x). For positive x the initial estimate
    follows Ken Turkowski, "Computing the Cube Root" (Apple TR KT-32): a
    working value v = x / 8^k is brought into [0.125, 1], a quadratic
    polynomial approximates cbrt(v), and the estimate is scaled back by 2^k.
    Newton-Raphson then refines it against the original x:
        x_{n+1} = (2 * x_n + x / x_n^2) / 3

    Args:
        x: Any value
        scale: Digits after the decimal point in the result
        out: Optional result location; may alias x
        config: Iteration limits (default: DEFAULT_MATH_CONFIG)

    Returns:
        out (or a new Dec) holding cbrt(x)
    """
    config = config or DEFAULT_MATH_CONFIG
    if out is None:
        out = Dec()
    elif out is x:
        x = x.copy()

    sign = x.sign()
    if sign < 0:
        # Recurse on a negated copy so the caller's x is never mutated.
        cbrt(Dec().neg(x), scale, out=out, config=config)
        return out.neg(out)
    if sign == 0:
        return out.set_unscaled(0).set_scale(0)

    z = out
    z.set(x)

    # After these loops x = z * 8^exp8 with z in [0.125, 1].
    exp8 = 0
    while z.cmp(DECIMAL_ONE_EIGHTH) < 0:
        exp8 -= 1
        z.mul(z, DECIMAL_EIGHT)
    while z.cmp(DECIMAL_ONE) > 0:
        exp8 += 1
        z.mul(z, DECIMAL_ONE_EIGHTH)

    # z = (C1 * z + C2) * z + C3. Only the iteration count depends on how
    # good this seed is, not the result.
    z0 = z.copy()
    z.mul(z, DECIMAL_CBRT_C1)
    z.add(z, DECIMAL_CBRT_C2)
    z.mul(z, z0)
    z.add(z, DECIMAL_CBRT_C3)

    # cbrt(8^exp8) = 2^exp8
    for _ in range(-exp8):
        z.mul(z, DECIMAL_HALF)
    for _ in range(exp8):
        z.mul(z, DECIMAL_TWO)

    logger.debug("cbrt_seeded", exp8=exp8, seed=str(z))

    working_scale = scale + _NEWTON_GUARD_DIGITS
    z0.set(z)
    loop = ConvergenceLoop("cbrt", z0, scale, 1, max_iterations=config.max_iterations)
    while True:
        z.mul(z0, z0)
        z.quo_round(x, z, working_scale, ROUND_HALF_UP)  # x / x_n^2
        z.add(z, z0)
        z.add(z, z0)
        z.quo_round(z, DECIMAL_THREE, working_scale, ROUND_HALF_UP)
        if loop.done(z):
            break
        z0.set(z)

    return z.round(z, scale, ROUND_HALF_UP)
