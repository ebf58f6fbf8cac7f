"""Configuration for the decimal math engine."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class MathConfig:
    """Tunable limits for the iterative algorithms.

    Attributes:
        max_precision: Largest working scale pow() may request before
            raising ArgumentTooLargeError (default: 500)
        log_guard_digits: Extra digits of scale log() carries through its
            square-root reductions and series (default: 20)
        log_min_iterations: Minimum number of Taylor terms summed by log()
            (default: 40)
        max_iterations: Iteration ceiling for every convergence loop. Hitting
            it raises ConvergenceError (default: 5000)
    """

    max_precision: int = 500
    log_guard_digits: int = 20
    log_min_iterations: int = 40
    max_iterations: int = 5000

    def __post_init__(self) -> None:
        if self.max_precision < 0:
            raise ValueError(f"max_precision must be non-negative, got {self.max_precision}")
        if self.log_guard_digits < 0:
            raise ValueError(f"log_guard_digits must be non-negative, got {self.log_guard_digits}")
        if self.log_min_iterations < 1:
            raise ValueError(f"log_min_iterations must be positive, got {self.log_min_iterations}")
        if self.max_iterations < self.log_min_iterations:
            raise ValueError(
                f"max_iterations ({self.max_iterations}) must be at least "
                f"log_min_iterations ({self.log_min_iterations})"
            )

    @classmethod
    def from_env(cls) -> MathConfig:
        """Build a config from DECMATH_* environment variables.

        Configuration via environment variables:
        - DECMATH_MAX_PRECISION (default: 500)
        - DECMATH_LOG_GUARD_DIGITS (default: 20)
        - DECMATH_LOG_MIN_ITERATIONS (default: 40)
        - DECMATH_MAX_ITERATIONS (default: 5000)

        Raises:
            ValueError: If a variable is not an integer or is out of range
        """
        defaults = cls()
        return cls(
            max_precision=_env_int("DECMATH_MAX_PRECISION", defaults.max_precision),
            log_guard_digits=_env_int("DECMATH_LOG_GUARD_DIGITS", defaults.log_guard_digits),
            log_min_iterations=_env_int("DECMATH_LOG_MIN_ITERATIONS", defaults.log_min_iterations),
            max_iterations=_env_int("DECMATH_MAX_ITERATIONS", defaults.max_iterations),
        )


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as err:
        raise ValueError(f"{name} must be an integer, got '{raw}'") from err


# Default configuration instance
DEFAULT_MATH_CONFIG = MathConfig()
