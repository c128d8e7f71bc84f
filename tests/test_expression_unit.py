import pytest
from sympy import Rational, cos, exp, log, pi, sin, sqrt, symbols

from symsolve import expression as ex
from symsolve.expression import Kind

x, y = symbols("x y")


@pytest.mark.parametrize(
    "expr,kind",
    [
        (3, Kind.CONSTANT),
        (pi, Kind.CONSTANT),
        (x, Kind.VARIABLE),
        (-3 * x**2, Kind.VARIABLE),
        (x * y, Kind.PRODUCT),
        (x + 1, Kind.SUM),
        ((x + 1)**2, Kind.SUM),
        (2 * sin(x), Kind.FUNCTION),
        (exp(x), Kind.EXPONENTIAL),
        (2**x, Kind.EXPONENTIAL),
    ],
)
def test_kind_of(expr, kind) -> None:
    assert ex.kind_of(expr) is kind


def test_decompose_and_separate() -> None:
    assert ex.decompose(3 * y * x**2, x) == (3 * y, x**2)
    assert ex.decompose_linear(2 * x + 1, x) == (2, x, 1)
    assert ex.separate(x + y - 3, x) == (x, 3 - y)


def test_monomial_power() -> None:
    assert ex.monomial_power(3 * sqrt(x), x) == (3, Rational(1, 2))
    assert ex.monomial_power(y * x**3, x) == (y, 3)
    assert ex.monomial_power(sin(x), x) is None


def test_function_detection() -> None:
    assert ex.has_function_of(sin(x) + 1, x)
    assert not ex.has_function_of(exp(x) + 1, x)
    assert not ex.has_function_of(sin(y) + x, x)
    assert ex.has_trig(cos(x))
    assert ex.has_log(log(x) + 1)
    assert ex.is_function(2 * sin(x), sin)
    assert not ex.is_function(exp(x))
    assert ex.unwrap_function(3 * cos(2 * x)) == (3, cos, 2 * x)


def test_sqrt_helpers() -> None:
    assert ex.is_sqrt(sqrt(x + 1), x)
    assert not ex.is_sqrt(sqrt(y), x)
    assert not ex.is_sqrt(x**2)
    assert ex.sqrt_part(2 * sqrt(x), x) == (2, sqrt(x))


def test_polynomial_helpers() -> None:
    assert ex.coefficients(x**2 + 2 * x + 3, x) == [3, 2, 1]
    assert ex.is_polynomial(y * x**2 + 1, x)
    assert not ex.is_polynomial(sin(x), x)
    assert ex.variables(x + y + 1) == ["x", "y"]
    assert set(ex.terms(x + 1)) == {1, x}
