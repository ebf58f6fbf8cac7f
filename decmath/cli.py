"""Command-line evaluation of decimal math operations.

Usage:
    decmath sqrt 2 --scale 10
    decmath pow 2 10 --scale 0
    decmath logn 8 2 --scale 5 --json
    decmath from-float 0.1

Exit codes:
    0 - Result printed
    1 - Recoverable math error (e.g. log of a non-positive value)
    2 - Invalid input or domain error
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from typing import Annotated, Any, Literal

import structlog
from pydantic import BaseModel, BeforeValidator, Field, ValidationError, model_validator

from decmath.algebraic import cbrt, mod, sqrt
from decmath.config import MathConfig
from decmath.dec import Dec
from decmath.errors import DecimalMathError, DomainError
from decmath.floats import decimal_from_float, float_from_decimal
from decmath.transcendental import exp, log, log10, log_n, pow

logger = structlog.get_logger()

DEFAULT_SCALE = 10

# Largest scale accepted from the command line
MAX_CLI_SCALE = 10_000

Operation = Literal[
    "sqrt", "cbrt", "mod", "log", "log10", "logn", "exp", "pow", "from-float", "to-float"
]

# Operation name -> (operand count, evaluator)
_Evaluator = Callable[[list[Dec], int, MathConfig], Any]
_OPERATIONS: dict[str, tuple[int, _Evaluator]] = {
    "sqrt": (1, lambda a, s, c: sqrt(a[0], s, config=c)),
    "cbrt": (1, lambda a, s, c: cbrt(a[0], s, config=c)),
    "mod": (2, lambda a, s, c: mod(a[0], a[1])),
    "log": (1, lambda a, s, c: log(a[0], s, config=c)),
    "log10": (1, lambda a, s, c: log10(a[0], s, config=c)),
    "logn": (2, lambda a, s, c: log_n(a[0], a[1], s, config=c)),
    "exp": (1, lambda a, s, c: exp(a[0], s, config=c)),
    "pow": (2, lambda a, s, c: pow(a[0], a[1], s, config=c)),
    "from-float": (1, lambda a, s, c: decimal_from_float(float(str(a[0])))),
    "to-float": (1, lambda a, s, c: float_from_decimal(a[0])),
}


def validate_decimal_string(value: Any) -> str:
    """Validate that a value is a finite decimal number.

    Args:
        value: Value to validate (string or int)

    Returns:
        The value as a decimal string

    Raises:
        ValueError: If value is not a finite decimal number
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if not isinstance(value, str):
        raise ValueError(f"Decimal must be string or int, got {type(value).__name__}")
    Dec.from_str(value)
    return value.strip()


# Finite decimal number as string (validated)
DecimalString = Annotated[
    str,
    BeforeValidator(validate_decimal_string),
    Field(description="Finite decimal number as string"),
]


class Evaluation(BaseModel):
    """A validated operation request."""

    operation: Operation
    operands: list[DecimalString]
    scale: int = Field(default=DEFAULT_SCALE, ge=0, le=MAX_CLI_SCALE)

    @model_validator(mode="after")
    def check_arity(self) -> Evaluation:
        expected, _ = _OPERATIONS[self.operation]
        if len(self.operands) != expected:
            raise ValueError(
                f"{self.operation} takes {expected} operand(s), got {len(self.operands)}"
            )
        return self

    def run(self, config: MathConfig) -> EvaluationResult:
        """Evaluate the operation and wrap its result."""
        _, evaluator = _OPERATIONS[self.operation]
        operands = [Dec.from_str(operand) for operand in self.operands]
        result = evaluator(operands, self.scale, config)
        text = repr(result) if isinstance(result, float) else str(result)
        return EvaluationResult(
            operation=self.operation, operands=self.operands, scale=self.scale, result=text
        )


class EvaluationResult(BaseModel):
    """Result of an evaluated operation."""

    operation: Operation
    operands: list[str]
    scale: int
    result: str


def configure_logging(verbose: bool) -> None:
    """Route structlog output to stderr at INFO, or DEBUG when verbose."""
    log_level = logging.DEBUG if verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="decmath",
        description="Evaluate arbitrary-precision decimal math operations",
    )
    parser.add_argument(
        "operation",
        choices=list(_OPERATIONS),
        help="Operation to evaluate",
    )
    parser.add_argument(
        "operands",
        nargs="+",
        help="Decimal operands (e.g. 2, -7.5, 1e-3)",
    )
    parser.add_argument(
        "--scale",
        "-s",
        type=int,
        default=DEFAULT_SCALE,
        help=f"Digits after the decimal point (default: {DEFAULT_SCALE})",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the decmath command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    try:
        config = MathConfig.from_env()
        evaluation = Evaluation(operation=args.operation, operands=args.operands, scale=args.scale)
    except (ValidationError, ValueError) as err:
        print(f"Error: {err}", file=sys.stderr)
        return 2

    try:
        result = evaluation.run(config)
    except DecimalMathError as err:
        logger.info("evaluation_failed", operation=err.operation, value=str(err.value))
        print(f"Error: {err}", file=sys.stderr)
        return 1
    except DomainError as err:
        print(f"Error: {err}", file=sys.stderr)
        return 2

    if args.json:
        print(result.model_dump_json())
    else:
        print(result.result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
