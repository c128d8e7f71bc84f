import math

import pytest
from sympy import I, asin, exp, log, pi, sqrt, symbols

from symsolve import engine
from symsolve.errors import ContradictionError, ParseError
from symsolve.outcome import ERROR, FOUND, NOT_FOUND, attempt
from symsolve.settings import SolveSettings
from symsolve.substitution import residual

x, a, b, c = symbols("x a b c")


def _as_floats(values) -> list:
    return sorted(float(v) for v in values)


# ── Shortcuts and trivial shapes ─────────────────────────────────────────

def test_identity_gives_zero() -> None:
    assert engine.solve("x = x") == [0]


def test_variable_alone_on_one_side() -> None:
    assert engine.solve("x = a + 1") == [a + 1]
    assert engine.solve("2b = x") == [2 * b]


def test_missing_variable_gives_no_solutions() -> None:
    assert engine.solve("y = 2", "x") == []


def test_monomial_only_vanishes_at_zero() -> None:
    assert engine.solve("5x^3 = 0") == [0]


def test_contradiction_raises() -> None:
    with pytest.raises(ContradictionError):
        engine.solve("1 = 2")


def test_parse_error_propagates() -> None:
    with pytest.raises(ParseError):
        engine.solve("2x @ 1 = 0")


def test_depth_limit_stops_recursion() -> None:
    solver = engine._Solver(x, SolveSettings(max_depth=1))
    assert solver.solve("x^2 - 4 = 0", depth=2) == []


# ── Polynomials in one variable ──────────────────────────────────────────

def test_linear_symbolic_coefficients() -> None:
    assert engine.solve("a*x + b = 0") == [-b / a]


def test_linear_numeric() -> None:
    assert engine.solve("2x + 3 = 7") == [2]


def test_quadratic_integer_roots_no_duplicates() -> None:
    result = engine.solve("x^2 - 4 = 0", "x")
    assert set(result) == {2, -2}
    assert len(result) == 2


def test_double_root_reported_once() -> None:
    assert engine.solve("x^2 - 2x + 1 = 0") == [1]


def test_repeated_factor_keeps_exact_roots() -> None:
    assert set(engine.solve("(x^2 - 2)^2 = 0")) == {sqrt(2), -sqrt(2)}
    assert set(engine.solve("sqrt(x^2 + 1) = 0")) == {I, -I}


def test_quadratic_irrational_and_complex_roots() -> None:
    assert set(engine.solve("x^2 = 2")) == {sqrt(2), -sqrt(2)}
    assert set(engine.solve("x^2 + 1 = 0")) == {I, -I}


def test_cubic_factors_into_integer_roots() -> None:
    assert set(engine.solve("x^3 - 6x^2 + 11x - 6 = 0")) == {1, 2, 3}


def test_high_degree_uses_numeric_roots() -> None:
    result = engine.solve("x^5 + x + 1 = 0")
    assert len(result) == 5
    for r in result:
        value = residual(x**5 + x + 1, {"x": r})
        assert abs(value) < 1e-9


def test_product_solves_each_factor() -> None:
    assert set(engine.solve(x * (x - 1))) == {0, 1}


def test_denominators_are_cleared() -> None:
    assert engine.solve("1/x + 1 = 0") == [-1]


def test_roots_of_cleared_denominators_rejected() -> None:
    assert engine.solve("x^2/(x - 1) = 1/(x - 1)") == [-1]
    assert engine.solve("(x^2 - 1)/(x + 1) = 0") == [1]


# ── Radicals and fractional powers ───────────────────────────────────────

def test_sqrt_equals_constant() -> None:
    assert engine.solve("sqrt(x) = 3") == [9]


def test_sqrt_spurious_root_rejected() -> None:
    assert engine.solve("sqrt(x + 1) = x - 1") == [3]


def test_fractional_power_corrected_and_checked() -> None:
    assert engine.solve("x^(2/3) = 4") == [8]


# ── Multivariate closed forms ────────────────────────────────────────────

def test_multivariate_quadratic_roots_satisfy_equation() -> None:
    roots = engine.solve("a*x^2 + b*x + c = 0")
    assert len(roots) == 2
    expr = a * x**2 + b * x + c
    for r in roots:
        value = residual(expr.subs(x, r), {"a": 1, "b": -3, "c": 2})
        assert abs(value) < 1e-9


def test_monomial_complex_roots() -> None:
    roots = engine.solve("x^5 + a = 0")
    assert len(roots) == 5
    for r in roots:
        value = residual((x**5 + a).subs(x, r), {"a": 32})
        assert abs(value) < 1e-9


def test_exponential_solved_with_log() -> None:
    assert engine.solve("a*e^x = b") == [log(b / a)]


# ── Functions ────────────────────────────────────────────────────────────

def test_abs_symbolic() -> None:
    assert set(engine.solve("abs(x) = a")) == {a, -a}


def test_abs_numeric() -> None:
    assert set(engine.solve("abs(x) = 3")) == {3, -3}


def test_inverse_trig_with_offset() -> None:
    assert engine.solve("sin(2x + 1) = a") == [(asin(a) - 1) / 2]


def test_log_inverted_through_exp() -> None:
    assert engine.solve("log(x) = a") == [exp(a)]


def test_sin_roots_snapped_to_pi() -> None:
    result = engine.solve("sin(x) = 0", "x")
    assert 0 in result
    assert pi in result
    assert -pi in result


def test_sin_roots_without_pi_conversion() -> None:
    result = engine.solve("sin(x) = 0", "x", SolveSettings(pi_conversions=False))
    assert pi not in result
    assert any(abs(float(r) - math.pi) < 1e-9 for r in result)


def test_numeric_log_root() -> None:
    result = engine.solve("log(x) = 2")
    assert len(result) == 1
    assert abs(float(result[0]) - math.exp(2)) < 1e-9


def test_numeric_exponential_root() -> None:
    assert engine.solve("2^x = 8") == [3]


def test_solve_is_repeatable() -> None:
    first = engine.solve("x^3 - x = 0")
    second = engine.solve("x^3 - x = 0")
    assert first == second
    assert _as_floats(first) == [-1.0, 0.0, 1.0]


def test_list_input_solves_system() -> None:
    assert engine.solve(["x + y = 3", "x - y = 1"]) == [("x", 2), ("y", 1)]


# ── Strategy outcomes ────────────────────────────────────────────────────

def test_attempt_wraps_results_and_errors() -> None:
    assert attempt("values", lambda: [1, 2]).status == FOUND
    assert attempt("empty", lambda: []).status == NOT_FOUND
    assert attempt("none", lambda: None).status == NOT_FOUND

    failed = attempt("boom", lambda: 1 / 0)
    assert failed.status == ERROR
    assert failed.kind == "ZeroDivisionError"
    assert failed.values == ()
