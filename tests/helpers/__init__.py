"""Test helpers module for shared test utilities.

- factories: Dec construction shorthand and decimal-module reference values
"""

from tests.helpers.factories import (
    D,
    assert_close,
    reference_exp,
    reference_ln,
    reference_pow,
    reference_sqrt,
)

__all__ = [
    "D",
    "assert_close",
    "reference_exp",
    "reference_ln",
    "reference_pow",
    "reference_sqrt",
]
