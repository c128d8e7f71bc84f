"""SymSolve — symbolic and numeric equation solving on top of SymPy."""

from symsolve.engine import solve
from symsolve.equation import Equation, to_lhs
from symsolve.errors import (
    ContradictionError,
    ParseError,
    RewriteError,
    SingularSystemError,
    SolveError,
)
from symsolve.settings import (
    SolveSettings,
    configure,
    get_settings,
    load_settings,
    reset_settings,
    save_settings,
)
from symsolve.substitution import check_solution
from symsolve.systems import solve_nonlinear_system, solve_system

__all__ = [
    "solve",
    "solve_system",
    "solve_nonlinear_system",
    "Equation",
    "to_lhs",
    "check_solution",
    "SolveSettings",
    "configure",
    "get_settings",
    "load_settings",
    "reset_settings",
    "save_settings",
    "SolveError",
    "ParseError",
    "ContradictionError",
    "SingularSystemError",
    "RewriteError",
]
