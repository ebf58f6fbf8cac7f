"""Tests for log, log10, log_n, integer_power, exp and pow."""

import random

import pytest
from structlog.testing import capture_logs

from decmath.config import MathConfig
from decmath.constants import DECIMAL_E
from decmath.dec import ROUND_HALF_UP, Dec
from decmath.errors import (
    ArgumentTooLargeError,
    DecimalMathError,
    DomainError,
    LogDomainError,
    PowNegativeNonIntegerError,
    PowZeroNegativeError,
)
from decmath.transcendental import exp, integer_power, log, log10, log_n, pow
from tests.helpers import D, assert_close, reference_exp, reference_ln, reference_pow


def _random_pow_operands(count: int, seed: int) -> list[tuple[str, str]]:
    """Base in [0.01, 50) with 4 decimals, exponent in [-12, 12) with 2 decimals."""
    rng = random.Random(seed)
    return [
        (f"{rng.uniform(0.01, 50):.4f}", f"{rng.uniform(-12, 12):.2f}") for _ in range(count)
    ]


class TestLog:
    """Tests for log()."""

    @pytest.mark.parametrize(
        "value,scale,expected",
        [
            ("10", 10, "2.3025850930"),
            ("2", 10, "0.6931471806"),
            ("0.5", 10, "-0.6931471806"),
            ("1", 5, "0"),
            ("1e100", 10, "230.2585092994"),
            ("1e-50", 10, "-115.1292546497"),
        ],
    )
    def test_known_values(self, value, scale, expected):
        """Natural logs of known values."""
        result = log(D(value), scale)
        assert result.scale == scale
        assert result == D(expected)

    @pytest.mark.parametrize(
        "value",
        ["2", "10", "0.5", "1.05", "0.95", "0.9", "1.1", "123456.789", "1e-50", "1e100", "0.0003"],
    )
    def test_matches_reference(self, value):
        """Results match the decimal module to within one unit in the last place."""
        assert_close(log(D(value), 20), reference_ln(value, 20))

    @pytest.mark.parametrize("value", ["0", "-1", "-0.001"])
    def test_non_positive_raises(self, value):
        """Logarithm of a non-positive value is a recoverable error."""
        with pytest.raises(LogDomainError) as exc_info:
            log(D(value), 10)
        assert exc_info.value.operation == "log"
        assert exc_info.value.value == D(value)

    def test_error_is_decimal_math_error(self):
        """LogDomainError is caught by the DecimalMathError tier."""
        with pytest.raises(DecimalMathError):
            log(D("0"), 10)

    def test_error_leaves_out_untouched(self):
        """A failed log does not write its output location."""
        out = D("42")
        with pytest.raises(LogDomainError):
            log(D("-1"), 10, out=out)
        assert out == 42

    def test_out_aliases_input(self):
        """out may be the input itself."""
        x = D("10")
        log(x, 10, out=x)
        assert str(x) == "2.3025850930"

    def test_range_reduction_is_logged(self):
        """Square-root reductions emit a debug event."""
        with capture_logs() as logs:
            log(D("100"), 10)
        events = [entry for entry in logs if entry["event"] == "log_range_reduced"]
        assert len(events) == 1
        assert events[0]["sqrt_count"] > 0

    def test_tight_config_still_converges(self, tight_config):
        """The series minimum still converges under the tight config."""
        # The series needs exactly log_min_iterations terms when r is small.
        result = log(D("1.0001"), 10, config=tight_config)
        assert_close(result, reference_ln("1.0001", 10))


class TestLog10:
    """Tests for log10()."""

    @pytest.mark.parametrize(
        "value,scale,expected",
        [
            ("1000", 5, "3.00000"),
            ("0.01", 5, "-2.00000"),
            ("2", 10, "0.3010299957"),
            ("1", 3, "0.000"),
        ],
    )
    def test_known_values(self, value, scale, expected):
        """Common logs of known values."""
        assert str(log10(D(value), scale)) == expected

    def test_non_positive_raises(self):
        """log10(0) is a recoverable error."""
        with pytest.raises(LogDomainError):
            log10(D("0"), 5)


class TestLogN:
    """Tests for log_n()."""

    @pytest.mark.parametrize(
        "x,n,scale,expected",
        [
            ("8", "2", 5, "3.00000"),
            ("81", "3", 6, "4.000000"),
            ("0.5", "4", 5, "-0.50000"),
        ],
    )
    def test_known_values(self, x, n, scale, expected):
        """Logs in an arbitrary base."""
        assert str(log_n(D(x), D(n), scale)) == expected

    def test_base_one_raises(self):
        """Base one has a zero logarithm and cannot be divided by."""
        with pytest.raises(LogDomainError) as exc_info:
            log_n(D("8"), D("1"), 5)
        assert exc_info.value.operation == "log_n"

    @pytest.mark.parametrize("x,n", [("0", "2"), ("8", "0"), ("8", "-2")])
    def test_non_positive_raises(self, x, n):
        """Both the argument and the base must be positive."""
        with pytest.raises(LogDomainError):
            log_n(D(x), D(n), 5)

    def test_out_aliases_base(self):
        """out may be the base."""
        x = D("8")
        n = D("2")
        log_n(x, n, 5, out=n)
        assert str(n) == "3.00000"
        assert x == 8


class TestIntegerPower:
    """Tests for integer_power()."""

    @pytest.mark.parametrize(
        "x,y,scale,expected",
        [
            ("2", 10, 0, "1024"),
            ("2", 0, 3, "1"),
            ("1.5", 3, 4, "3.375"),
            ("-3", 3, 0, "-27"),
            ("-3", 4, 0, "81"),
            ("2", -2, 4, "0.25"),
            ("10", -3, 5, "0.001"),
            ("0.1", 5, 5, "0.00001"),
            ("1.5", 4, 0, "5"),
            ("0.5", -20, 0, "1048576"),
            ("0.3", -10, 1, "169350.9"),
            ("0.001", -10, 2, "1e30"),
        ],
    )
    def test_known_values(self, x, y, scale, expected):
        """Integer powers by repeated squaring."""
        result = integer_power(D(x), y, scale)
        assert result.scale == scale
        assert result == D(expected)

    def test_base_not_mutated(self):
        """The base is copied before squaring."""
        e_repr = repr(DECIMAL_E)
        integer_power(DECIMAL_E, 7, 20)
        assert repr(DECIMAL_E) == e_repr

    def test_out_aliases_base(self):
        """out may be the base."""
        x = D("3")
        integer_power(x, 4, 0, out=x)
        assert x == 81

    def test_zero_negative_power_raises(self):
        """Inverting a zero power is a domain error."""
        with pytest.raises(DomainError):
            integer_power(D("0"), -1, 5)

    def test_e_powers(self):
        """Powers of e match exp at integer arguments."""
        assert_close(integer_power(DECIMAL_E, 3, 20), reference_exp("3", 20))

    @pytest.mark.parametrize(
        "x,y,scale",
        [
            ("0.3", -10, 20),
            ("1.0001", 5000, 10),
            ("0.97", 250, 20),
            ("7.5", -13, 25),
            ("0.002", -7, 5),
            ("12.34", 17, 8),
        ],
    )
    def test_matches_reference(self, x, y, scale):
        """Results match the decimal module to within one unit in the last place."""
        assert_close(integer_power(D(x), y, scale), reference_pow(x, str(y), scale))

    def test_error_leaves_out_untouched(self):
        """A failed inversion does not write its output location."""
        out = D("5")
        with pytest.raises(DomainError):
            integer_power(D("0"), -3, 2, out=out)
        assert repr(out) == "Dec(5, 0)"

    def test_small_base_negative_power_into_out(self):
        """A base below one inverts cleanly into out."""
        out = D("5")
        result = integer_power(D("0.001"), -10, 2, out=out)
        assert result is out
        assert out == D("1e30")


class TestExp:
    """Tests for exp()."""

    @pytest.mark.parametrize(
        "value,scale,expected",
        [
            ("1", 10, "2.7182818285"),
            ("-1", 10, "0.3678794412"),
            ("0.5", 10, "1.6487212707"),
            ("2.5", 10, "12.1824939607"),
            ("0", 5, "1"),
        ],
    )
    def test_known_values(self, value, scale, expected):
        """Exponentials of known values."""
        result = exp(D(value), scale)
        assert result.scale == scale
        assert result == D(expected)

    @pytest.mark.parametrize("value", ["1", "-1", "0.5", "2.5", "-7.25", "10", "0.001", "-0.999"])
    def test_matches_reference(self, value):
        """Results match the decimal module to within one unit in the last place."""
        assert_close(exp(D(value), 20), reference_exp(value, 20))

    @pytest.mark.parametrize(
        "value,scale",
        [("100", 5), ("300", 5), ("57.125", 10), ("-45.5", 25), ("23.999", 30)],
    )
    def test_large_arguments_match_reference(self, value, scale):
        """Results with many integer digits keep every digit."""
        assert_close(exp(D(value), scale), reference_exp(value, scale))

    def test_large_negative_underflows_to_zero(self):
        """Results far below the target scale are zero."""
        with capture_logs() as logs:
            result = exp(D("-1000"), 10)
        assert result == 0
        assert result.scale == 10
        assert any(entry["event"] == "exp_underflow" for entry in logs)

    def test_integer_part_out_of_range_raises(self):
        """An integer part beyond int64 is a domain error."""
        with pytest.raises(DomainError, match="out of range"):
            exp(D("1e20"), 5)

    def test_out_aliases_input(self):
        """out may be the input itself."""
        x = D("1")
        exp(x, 10, out=x)
        assert str(x) == "2.7182818285"

    @pytest.mark.parametrize("value", ["0.3", "1.7", "4", "-2.2"])
    def test_log_inverts_exp(self, value):
        """log(exp(x)) returns x."""
        assert_close(log(exp(D(value), 25), 20), Dec().round(D(value), 20, ROUND_HALF_UP))


class TestPow:
    """Tests for pow()."""

    @pytest.mark.parametrize(
        "x,y,scale,expected",
        [
            ("2", "10", 0, "1024"),
            ("2", "0.5", 10, "1.4142135624"),
            ("-2", "3", 5, "-8"),
            ("-2", "2", 5, "4"),
            ("2", "-2", 4, "0.2500"),
            ("1.5", "2", 4, "2.25"),
            ("6.25", "0.5", 8, "2.5"),
            ("1e10", "0", 3, "1"),
            ("0.5", "-10", 10, "1024.0000000000"),
            ("0.25", "-0.5", 6, "2"),
        ],
    )
    def test_known_values(self, x, y, scale, expected):
        """Powers of known values."""
        result = pow(D(x), D(y), scale)
        assert result.scale == scale
        assert result == D(expected)

    @pytest.mark.parametrize(
        "x,y,scale",
        [
            ("0.5", "-10", 10),
            ("0.9", "-300", 4),
            ("0.4567", "-29.61", 2),
            ("0.999", "-1000", 8),
            ("0.01", "-4.5", 6),
            ("-0.8", "-5", 12),
            ("0.25", "0.75", 20),
            ("2", "0.5", 20),
            ("3.7", "2.5", 15),
            ("123.456", "3.21", 10),
            ("1.0001", "1234", 10),
            ("-1.5", "7", 12),
            ("7", "-3.3", 18),
            ("45.6", "-2.2", 20),
        ],
    )
    def test_matches_reference(self, x, y, scale):
        """Results match the decimal module to within one unit in the last place."""
        assert_close(pow(D(x), D(y), scale), reference_pow(x, y, scale))

    @pytest.mark.parametrize("x,y", _random_pow_operands(30, seed=20261019))
    def test_random_operands_match_reference(self, x, y):
        """Seeded random bases and exponents of either sign match the decimal module."""
        assert_close(pow(D(x), D(y), 10), reference_pow(x, y, 10))

    def test_zero_special_cases(self):
        """0^0 is one and 0^y is zero for positive y."""
        assert pow(D("0"), D("0"), 5) == 1
        assert pow(D("0"), D("2.5"), 5) == 0

    def test_zero_negative_raises(self):
        """Zero raised to a negative power is a recoverable error."""
        with pytest.raises(PowZeroNegativeError) as exc_info:
            pow(D("0"), D("-1"), 5)
        assert exc_info.value.operation == "pow"

    def test_negative_non_integer_raises(self):
        """A negative base needs an integer exponent."""
        with pytest.raises(PowNegativeNonIntegerError):
            pow(D("-2"), D("0.5"), 5)

    def test_argument_too_large_raises(self):
        """A result with too many digits is rejected before computing."""
        with pytest.raises(ArgumentTooLargeError):
            pow(D("10"), D("1000"), 2)

    def test_max_precision_is_configurable(self):
        """max_precision bounds the working scale."""
        with pytest.raises(ArgumentTooLargeError):
            pow(D("2"), D("10"), 10, config=MathConfig(max_precision=10))

    def test_small_base_large_exponent_is_zero(self):
        """0.5^1e9 underflows to zero instead of failing."""
        assert pow(D("0.5"), D("1e9"), 5) == 0

    def test_error_leaves_out_untouched(self):
        """A failed pow does not write its output location."""
        out = D("7")
        with pytest.raises(PowZeroNegativeError):
            pow(D("0"), D("-2"), 5, out=out)
        assert out == 7

    def test_exponent_not_mutated(self):
        """y is read, never written."""
        y = D("0.5")
        pow(D("2"), y, 10)
        assert repr(y) == "Dec(5, 1)"

    def test_out_aliases_base(self):
        """out may be the base."""
        x = D("2")
        pow(x, D("10"), 0, out=x)
        assert x == 1024

    def test_out_aliases_exponent(self):
        """out may be the exponent."""
        y = D("3")
        pow(D("-2"), y, 5, out=y)
        assert y == -8

    def test_working_scale_is_logged(self):
        """The computed working scale is emitted at debug level."""
        with capture_logs() as logs:
            pow(D("2"), D("10"), 0)
        events = [entry for entry in logs if entry["event"] == "pow_working_scale"]
        assert events[0]["exponent_scale"] > 2
