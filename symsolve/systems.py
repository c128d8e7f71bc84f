"""
Systems of equations.

Linear systems are solved exactly as ``M⁻¹·c`` with SymPy matrices.
Systems with a non-linear equation fall back to a multivariate
Newton-Raphson iteration on NumPy arrays, restarting from new seeds when
it diverges.
"""

import logging

import numpy as np
import sympy
from sympy import Matrix, S, Symbol, expand, lambdify, simplify

from symsolve import expression as ex
from symsolve.equation import to_lhs
from symsolve.errors import SingularSystemError, SolveError
from symsolve.results import to_number
from symsolve.settings import SolveSettings, get_settings

logger = logging.getLogger(__name__)

EPSILON = np.finfo(float).eps

_CONVERGED = "converged"
_DIVERGING = "diverging"
_EXHAUSTED = "exhausted"


# ── Helpers ──────────────────────────────────────────────────────────────

def system_variables(eqns) -> list:
    """Sorted names of every variable appearing in *eqns*."""
    names = set()
    for e in eqns:
        names.update(ex.variables(e))
    return sorted(names)


def all_linear(eqns, names) -> bool:
    """True when every equation has total degree ≤ 1 in *names*."""
    symbols = [Symbol(n) for n in names]
    for e in eqns:
        if not e.free_symbols:
            continue
        if not e.is_polynomial(*symbols):
            return False
        if sympy.Poly(e, *symbols).total_degree() > 1:
            return False
    return True


def system_solutions(values, names, settings: SolveSettings, expand_result: bool = False):
    """Pair each value with its variable name.

    Returns a dict when ``settings.solutions_as_object`` is set, otherwise
    a list of ``(name, value)`` tuples in variable order.
    """
    pairs = []
    for name, value in zip(names, values):
        if expand_result:
            value = expand(value)
        pairs.append((name, value))
    if settings.solutions_as_object:
        return dict(pairs)
    return pairs


def _empty(settings: SolveSettings):
    return {} if settings.solutions_as_object else []


# ── Linear systems ───────────────────────────────────────────────────────

def _default_matrix(eqns, names) -> tuple:
    """Coefficient matrix and negated constant vector, all names unknown."""
    symbols = [Symbol(n) for n in names]
    m = sympy.zeros(len(eqns), len(symbols))
    c = sympy.zeros(len(eqns), 1)
    for i, e in enumerate(eqns):
        for j, v in enumerate(symbols):
            total = S.Zero
            for term in ex.terms(e):
                if v in term.free_symbols:
                    total += ex.decompose(term, v)[0]
            m[i, j] = total
        c[i, 0] = -e.subs({v: 0 for v in symbols})
    return m, c


def _explicit_matrix(eqns, names) -> tuple:
    """Coefficient matrix for an explicit variable list.

    Other symbols are parameters.  The constant vector keeps the sign of
    the remaining terms, so the product ``M⁻¹·c`` must be negated.
    """
    symbols = [Symbol(n) for n in names]
    m = sympy.zeros(len(eqns), len(symbols))
    c = sympy.zeros(len(eqns), 1)
    for i, e in enumerate(eqns):
        for term in ex.terms(expand(e)):
            found = [v for v in symbols if v in term.free_symbols]
            if len(found) > 1:
                raise SolveError(f"Multiple variables found for term {term}")
            if not found:
                c[i, 0] += term
                continue
            v = found[0]
            coeff, part = ex.decompose(term, v)
            if part != v:
                raise SolveError(f"Term {term} is not linear in {v}")
            m[i, symbols.index(v)] += coeff
    return m, c


def solve_system(equations, variables=None, settings: SolveSettings = None):
    """
    Solve a system of equations.

    *equations* may be strings, ``Equation`` objects or expressions equal
    to zero.  Without *variables* every symbol is an unknown and a system
    with any non-linear equation is handed to
    ``solve_nonlinear_system``.  With *variables* the remaining symbols
    are parameters and the solution is symbolic.

    Raises ``SingularSystemError`` when the linear system has no distinct
    solution.
    """
    settings = settings or get_settings()
    eqns = [to_lhs(e) for e in equations]

    if variables is None:
        names = system_variables(eqns)
        if not all_linear(eqns, names):
            return solve_nonlinear_system(eqns, settings)
        m, c = _default_matrix(eqns, names)
    else:
        names = [str(v) for v in variables]
        m, c = _explicit_matrix(eqns, names)

    if m.rows != m.cols or simplify(m.det()) == 0:
        raise SingularSystemError("System does not have a distinct solution")
    result = m.inv() * c
    if variables is not None:
        result = -result
    return system_solutions(list(result), names, settings,
                            expand_result=variables is not None)


# ── Nonlinear systems ────────────────────────────────────────────────────

def jacobian(eqns, names) -> Matrix:
    """Matrix of partial derivatives ``d eqns[i] / d names[j]``."""
    return Matrix(eqns).jacobian([Symbol(n) for n in names])


def _newton_attempt(f, jac, n: int, start: float, settings: SolveSettings) -> tuple:
    """One multivariate Newton run from the seed ``(start, ..., start)``.

    Returns ``(status, x)`` with status converged, diverging or exhausted.
    """
    x = np.full(n, float(start))
    previous = np.zeros(n)
    norm = None
    for iteration in range(settings.max_newton_iterations + 1):
        try:
            with np.errstate(all="ignore"):
                fx = np.asarray(f(*x), dtype=float).reshape(n)
                jx = np.asarray(jac(*x), dtype=float).reshape(n, n)
            step = -np.linalg.solve(jx, fx)
        except (np.linalg.LinAlgError, TypeError, ValueError, ZeroDivisionError):
            return _DIVERGING, None
        if not np.all(np.isfinite(step)):
            return _DIVERGING, None

        change = step - previous
        previous = step
        x = x + step

        # Past this point a large correction means the seed was a bad one.
        if iteration >= settings.nonlinear_jump_at and norm is not None and norm > 1:
            return _DIVERGING, None

        last, norm = norm, float(np.max(np.abs(change)))
        settled = float(np.max(np.abs(step))) <= EPSILON * max(1.0, float(np.max(np.abs(x))))
        if norm == last or norm < EPSILON or settled:
            return _CONVERGED, x
    return _EXHAUSTED, None


def solve_nonlinear_system(eqns, settings: SolveSettings = None):
    """Solve ``eqns = 0`` numerically with multivariate Newton-Raphson.

    Seeds start at ``nonlinear_start``.  A diverging run restarts from a
    seed moved by ``n * nonlinear_jump_size`` where ``n`` grows with the
    attempt and the sign flips once half of ``max_nonlinear_tries`` is
    used up.  Returns an empty result when every attempt fails.
    """
    settings = settings or get_settings()
    eqns = [to_lhs(e) for e in eqns]
    names = system_variables(eqns)
    if len(names) != len(eqns):
        logger.debug("Nonlinear system with %d equations and %d variables",
                     len(eqns), len(names))
        return _empty(settings)

    symbols = [Symbol(n) for n in names]
    f = lambdify(symbols, eqns, modules="numpy")
    jac = lambdify(symbols, jacobian(eqns, names), modules="numpy")

    tries = settings.max_nonlinear_tries
    half = max(tries // 2, 1)
    jump = settings.nonlinear_jump_size
    start = settings.nonlinear_start

    while tries >= 0:
        status, x = _newton_attempt(f, jac, len(names), start, settings)
        if status == _CONVERGED:
            values = [to_number(round(float(v), 14), settings) for v in x]
            return system_solutions(values, names, settings)
        if status == _EXHAUSTED:
            logger.debug("Newton iteration cap reached from seed %s", start)
            return _empty(settings)

        if tries == half:
            start = 0
        sign = 1 if tries > half else -1
        n = tries % half + 1
        start += sign * n * jump
        tries -= 1
        logger.debug("Diverging; restarting from seed %s (%d tries left)", start, tries)
    return _empty(settings)
