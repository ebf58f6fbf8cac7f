"""Iteration termination shared by the iterative algorithms.

Each algorithm creates a ConvergenceLoop with its first estimate and calls
done() once per iteration:

    loop = ConvergenceLoop("sqrt", z, scale, min_iterations=1)
    while True:
        ...  # refine z
        if loop.done(z):
            break
"""

from __future__ import annotations

import structlog

from decmath.config import DEFAULT_MATH_CONFIG
from decmath.dec import ROUND_HALF_UP, Dec
from decmath.errors import ConvergenceError

logger = structlog.get_logger()


class ConvergenceLoop:
    """Tracks successive estimates and decides when to stop iterating.

    An estimate has converged when the change since the previous estimate
    rounds (half-up) to zero at the target scale and at least min_iterations
    estimates have been recorded. There is no silent cap: reaching
    max_iterations without converging raises ConvergenceError.

    Attributes:
        name: Label used in log events and error messages
        scale: Target scale at which changes are judged
        min_iterations: Estimates to record before convergence may be declared
        max_iterations: Iteration ceiling
        iterations: Estimates recorded so far
    """

    __slots__ = ("name", "scale", "min_iterations", "max_iterations", "iterations", "_prev", "_delta")

    def __init__(
        self,
        name: str,
        start: Dec,
        scale: int,
        min_iterations: int,
        *,
        max_iterations: int | None = None,
    ) -> None:
        if max_iterations is None:
            max_iterations = DEFAULT_MATH_CONFIG.max_iterations
        if min_iterations < 1:
            raise ValueError(f"min_iterations must be positive, got {min_iterations}")
        if max_iterations < min_iterations:
            raise ValueError(
                f"max_iterations ({max_iterations}) must be at least min_iterations ({min_iterations})"
            )
        self.name = name
        self.scale = scale
        self.min_iterations = min_iterations
        self.max_iterations = max_iterations
        self.iterations = 0
        self._prev = start.copy()
        self._delta = Dec()

    def done(self, z: Dec) -> bool:
        """Record estimate z and report whether the loop has converged.

        Raises:
            ConvergenceError: If max_iterations estimates were recorded
                without converging
        """
        self.iterations += 1
        delta = self._delta
        delta.sub(z, self._prev).abs(delta)
        settled = delta.round(delta, self.scale, ROUND_HALF_UP).sign() == 0
        self._prev.set(z)

        if settled and self.iterations >= self.min_iterations:
            logger.debug(
                "convergence_loop_done",
                loop=self.name,
                iterations=self.iterations,
                scale=self.scale,
            )
            return True

        if self.iterations >= self.max_iterations:
            logger.error(
                "convergence_loop_exhausted",
                loop=self.name,
                iterations=self.iterations,
                scale=self.scale,
                last=str(z),
            )
            raise ConvergenceError(
                f"{self.name}: did not converge after {self.iterations} iterations "
                f"(last estimate {z}, scale {self.scale})"
            )
        return False
