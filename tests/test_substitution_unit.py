import pytest
from sympy import Rational, sqrt, symbols

from symsolve.errors import ParseError
from symsolve.substitution import _parse_values, check_solution, is_root, residual

x, a = symbols("x a")


def test_parse_values() -> None:
    assert _parse_values("x = 3, y = 4") == {"x": 3, "y": 4}
    assert _parse_values("x=1/2") == {"x": Rational(1, 2)}


@pytest.mark.parametrize("raw", ["x 3", "= 3", "3x = 1", ""])
def test_parse_values_rejects_bad_input(raw: str) -> None:
    with pytest.raises(ParseError):
        _parse_values(raw)


def test_check_solution_holds() -> None:
    result = check_solution("2x + 1 = 7", "x = 3")
    assert result["holds"] is True
    assert result["lhs"] == 7
    assert result["rhs"] == 7


def test_check_solution_fails() -> None:
    result = check_solution("2x + 1 = 7", "x = 4")
    assert result["holds"] is False
    assert result["lhs"] == 9


def test_check_solution_with_mapping_and_irrational_value() -> None:
    assert check_solution("x^2 = 2", {"x": sqrt(2)})["holds"] is True


def test_check_solution_missing_variable() -> None:
    with pytest.raises(ParseError, match="Missing value"):
        check_solution("x + y = 3", "x = 1")


def test_residual_and_is_root() -> None:
    assert residual(x + 1, {"x": 2}) == 3
    assert residual(x + a, {"x": 2}) is None

    assert is_root(x**2 - 4, x, 2)
    assert not is_root(x**2 - 4, x, 3)
    # Symbolic candidates cannot be checked numerically and are kept.
    assert is_root(x**2 - 4, x, a)
