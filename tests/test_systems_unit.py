import math

import pytest
from sympy import Matrix, symbols

from symsolve import systems
from symsolve.errors import SingularSystemError, SolveError
from symsolve.settings import SolveSettings

x, y, a = symbols("x y a")


# ── Linear systems ───────────────────────────────────────────────────────

def test_two_by_two_system() -> None:
    assert systems.solve_system(["x + y = 3", "x - y = 1"]) == [("x", 2), ("y", 1)]


def test_three_by_three_system() -> None:
    result = systems.solve_system(["x + y + z = 6", "2x - y = 0", "y - z = -1"])
    assert result == [("x", 1), ("y", 2), ("z", 3)]


def test_solutions_as_object() -> None:
    settings = SolveSettings(solutions_as_object=True)
    assert systems.solve_system(["x + y = 10", "x - y = 2"], settings=settings) == {"x": 6, "y": 4}


def test_singular_system_raises() -> None:
    with pytest.raises(SingularSystemError, match="distinct solution"):
        systems.solve_system(["x + y = 1", "2x + 2y = 2"])


def test_non_square_system_raises() -> None:
    with pytest.raises(SingularSystemError):
        systems.solve_system(["x + y + z = 1", "x - y = 0"])


def test_explicit_variables_keep_parameters() -> None:
    result = dict(systems.solve_system(["a*x + y = 3", "x - y = 1"], ["x", "y"]))
    assert set(result) == {"x", "y"}
    assert result["x"].subs(a, 1) == 2
    assert result["y"].subs(a, 1) == 1
    assert "a" in str(result["x"])


def test_explicit_variables_reject_mixed_terms() -> None:
    with pytest.raises(SolveError, match="Multiple variables"):
        systems.solve_system(["x*y + x = 1", "x - y = 0"], ["x", "y"])


# ── Helpers ──────────────────────────────────────────────────────────────

def test_all_linear() -> None:
    assert systems.all_linear([x + 2 * y - 1, x - y], ["x", "y"])
    assert not systems.all_linear([x * y - 1, x - y], ["x", "y"])
    assert not systems.all_linear([x**2 + y], ["x", "y"])


def test_jacobian() -> None:
    assert systems.jacobian([x**2 + y, x * y], ["x", "y"]) == Matrix([[2 * x, 1], [y, x]])


def test_system_solutions_shapes() -> None:
    pairs = systems.system_solutions([1, 2], ["x", "y"], SolveSettings())
    assert pairs == [("x", 1), ("y", 2)]
    obj = systems.system_solutions([1, 2], ["x", "y"], SolveSettings(solutions_as_object=True))
    assert obj == {"x": 1, "y": 2}


# ── Nonlinear systems ────────────────────────────────────────────────────

def test_nonlinear_circle_and_line() -> None:
    result = systems.solve_system(["x^2 + y^2 = 1", "x - y = 0"])
    assert result
    values = dict(result)
    assert abs(float(values["x"]) - float(values["y"])) < 1e-9
    assert abs(abs(float(values["x"])) - math.sqrt(2) / 2) < 1e-9


def test_nonlinear_restart_seeds(monkeypatch) -> None:
    seeds = []

    def diverge(f, jac, n, start, settings):
        seeds.append(start)
        return systems._DIVERGING, None

    monkeypatch.setattr(systems, "_newton_attempt", diverge)
    settings = SolveSettings(max_nonlinear_tries=12, nonlinear_jump_size=100)
    assert systems.solve_nonlinear_system([x**2 + y**2 - 1, x - y], settings) == []
    # Growing jumps upward from the start, then the same pattern below zero.
    assert seeds == pytest.approx([
        0.01, 100.01, 700.01, 1200.01, 1600.01, 1900.01, 2100.01,
        -100, -700, -1200, -1600, -1900, -2100,
    ])


def test_nonlinear_solution_is_a_root() -> None:
    eqns = [x**2 - y - 1, x + y - 5]
    result = systems.solve_nonlinear_system(eqns, SolveSettings(solutions_as_object=True))
    assert result
    subs = {x: float(result["x"]), y: float(result["y"])}
    for e in eqns:
        assert abs(float(e.subs(subs))) < 1e-9


def test_nonlinear_mismatched_counts_give_empty() -> None:
    assert systems.solve_nonlinear_system([x**2 + y**2 - 1]) == []
    settings = SolveSettings(solutions_as_object=True)
    assert systems.solve_nonlinear_system([x**2 + y**2 - 1], settings) == {}


def test_nonlinear_without_real_solution_gives_empty() -> None:
    settings = SolveSettings(max_nonlinear_tries=2, max_newton_iterations=60)
    assert systems.solve_nonlinear_system([x**2 + y**2 + 1, x - y], settings) == []
