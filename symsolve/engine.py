"""
SymSolve — the recursive equation solver.

``solve`` classifies the shape of ``expr = 0`` and routes it to the
rewriter, a closed-form polynomial formula, the numeric root finder or a
recursive sub-solve (factors, squared radicals, inverse functions).
Strategies report through ``Outcome`` values; a strategy that raises
simply contributes no solutions.
"""

import logging
import math

import sympy
from sympy import Mul, PolynomialError, S, exp, expand, factor, factor_list, fraction, log, together

from symsolve import expression as ex
from symsolve import numerical, polynomial
from symsolve.equation import Equation
from symsolve.errors import RewriteError
from symsolve.outcome import ERROR, Outcome, attempt
from symsolve.results import SolutionSet, to_number
from symsolve.rewrite import rewrite
from symsolve.settings import SolveSettings, get_settings
from symsolve.substitution import TOLERANCE, is_root, residual
from symsolve.systems import solve_system

logger = logging.getLogger(__name__)


def solve(equation, variable="x", settings: SolveSettings = None):
    """
    Solve an equation (or a system of equations).

    Accepts:
      - a string ``"lhs=rhs"`` (a missing RHS means ``= 0``)
      - an ``Equation``
      - a SymPy expression, read as ``expr = 0``
      - a list/tuple of the above, solved as a system; *variable* may then
        be a list of names

    Returns a list of SymPy expressions for a single equation, or the
    system solution (pairs or a dict, see ``solutions_as_object``).
    The settings are read once here and used for the whole call tree.
    """
    settings = settings or get_settings()
    if isinstance(equation, (list, tuple)):
        variables = variable if isinstance(variable, (list, tuple)) else None
        return solve_system(equation, variables, settings)
    return _Solver(ex.as_symbol(variable), settings).solve(equation)


class _Solver:
    """One solve invocation: the target variable plus its settings."""

    def __init__(self, variable, settings: SolveSettings):
        self.x = variable
        self.settings = settings

    # ── Entry ───────────────────────────────────────────────────────────

    def solve(self, value, depth: int = 0) -> list:
        if depth > self.settings.max_depth:
            logger.debug("Depth limit %d reached on %s", self.settings.max_depth, value)
            return []
        x = self.x

        if isinstance(value, str):
            value = Equation.parse(value)
        if isinstance(value, Equation):
            shortcut = self._shortcut(value)
            if shortcut is not None:
                return shortcut
            # to_lhs() clears the denominators, so their zeros are rejected here.
            poles = fraction(together(value.lhs - value.rhs))[1]
            found = self._solve_expr(value.to_lhs(), depth)
            if x in poles.free_symbols:
                found = [r for r in found if not self._vanishes(poles, r)]
            return found
        return self._solve_expr(sympy.sympify(value), depth)

    def _solve_expr(self, eq, depth: int) -> list:
        x = self.x
        if x not in eq.free_symbols:
            return []

        # A bare power of the variable only vanishes at zero.
        shape = ex.monomial_power(eq, x)
        if shape is not None and shape[1] > 0:
            return [S.Zero]

        solutions = SolutionSet(self.settings, ex.has_trig(eq))

        # A product is zero iff one of its factors is.
        if isinstance(eq, Mul):
            for factor_ in eq.args:
                _, power = ex.split_power(factor_)
                if x in factor_.free_symbols and not power.is_negative:
                    solutions.extend(self.solve(factor_, depth + 1))
            return solutions.to_list()

        if ex.is_sqrt(eq):
            eq = expand(eq.base ** 2)

        original = eq
        eq, denominator, correction = self._correct(eq)
        if eq == 0:
            return [S.Zero]

        solutions.extend(attempt("sqrt", self._sqrt_solve, eq, depth).values)

        if eq.free_symbols == {x}:
            if ex.is_polynomial(eq, x):
                solutions.extend(attempt("polynomial", self._polynomial, eq, depth).values)
            else:
                solutions.extend(
                    attempt("numeric", numerical.find_roots, eq, x, self.settings).values)
        elif not ex.has_function_of(eq, x) and ex.kind_of(eq) is ex.Kind.SUM:
            solutions.extend(attempt("coefficients", self._by_coefficients, eq, depth).values)
        else:
            outcome = attempt("rewrite", self._by_rewrite, eq, depth)
            if outcome.status == ERROR:
                outcome = attempt("power base", self._power_base, eq)
            solutions.extend(outcome.values)

        if correction is not None:
            solutions.map(lambda r: expand(r ** correction))
            solutions.keep(lambda r: is_root(original, x, r))
        if denominator is not None:
            solutions.keep(lambda r: not self._vanishes(denominator, r))
        return solutions.to_list()

    def _shortcut(self, eqn: Equation):
        x = self.x
        if eqn.is_zero():
            return [S.Zero]
        if eqn.lhs == x and x not in eqn.rhs.free_symbols:
            return [eqn.rhs]
        if eqn.rhs == x and x not in eqn.lhs.free_symbols:
            return [eqn.lhs]
        return None

    # ── Normalisation ───────────────────────────────────────────────────

    def _correct(self, eq) -> tuple:
        """Clear denominators and fractional powers of the variable.

        Returns ``(expr, denominator, correction)``.  *denominator* is the
        cleared denominator when it contains the variable (roots making it
        vanish are rejected later).  *correction* is ``q`` when every power
        ``p`` of the variable was replaced by ``p*q``; roots of the new
        expression must then be raised to ``q``.
        """
        x = self.x
        num, den = fraction(together(eq))
        num = expand(num)
        denominator = den if x in den.free_symbols else None

        denominators = set()
        for term in ex.terms(num):
            if x not in term.free_symbols:
                continue
            shape = ex.monomial_power(term, x)
            if shape is None or x in shape[0].free_symbols:
                return num, denominator, None
            if shape[1].q > 1:
                denominators.add(int(shape[1].q))
        if not denominators:
            return num, denominator, None

        q = math.lcm(*denominators)
        corrected = S.Zero
        for term in ex.terms(num):
            shape = ex.monomial_power(term, x) if x in term.free_symbols else None
            if shape is None:
                corrected += term
            else:
                coeff, power = shape
                corrected += coeff * x ** (power * q)
        return corrected, denominator, q

    def _vanishes(self, expr, value) -> bool:
        r = residual(expr, {self.x: value})
        return r is not None and abs(r) <= TOLERANCE

    # ── Strategies ──────────────────────────────────────────────────────

    def _sqrt_solve(self, eq, depth):
        """Square away the radicals of ``sqrt(f) + ... + g = 0``."""
        if not isinstance(eq, sympy.Add):
            return None
        roots, rest = S.Zero, S.Zero
        for term in eq.args:
            if ex.sqrt_part(term, self.x) is not None:
                roots += term
            else:
                rest += term
        if roots == 0:
            return None
        squared = expand(rest ** 2 - roots ** 2)
        candidates = self.solve(squared, depth + 1)
        # Squaring adds the roots of the conjugate equation as well.
        return [c for c in candidates
                if (c.is_number and c.is_real is False) or is_root(eq, self.x, c)]

    def _polynomial(self, eq, depth):
        """Roots of a polynomial in the single variable."""
        x = self.x
        _, parts = factor_list(eq)
        symbolic = [(f, m) for f, m in parts if x in f.free_symbols]
        # Repeated factors too: the expanded form may exceed the closed forms.
        if len(symbolic) > 1 or any(m > 1 for _, m in symbolic):
            found = []
            for f, _ in symbolic:
                found.extend(self.solve(f, depth + 1))
            return found

        coeffs = ex.coefficients(eq, x)
        degree = len(coeffs) - 1
        if all(c.is_number for c in coeffs):
            roots = polynomial.integer_roots(coeffs)
            if roots is not None:
                return [sympy.Integer(r) for r in roots]

        if degree == 1:
            return polynomial.linear(*coeffs)
        if degree == 2:
            return [expand(r) for r in polynomial.quadratic(*coeffs)]
        if degree == 3:
            factored = factor(eq)
            if factored != eq:
                found = attempt("cubic factor", self.solve, factored, depth + 1)
                if found.ok:
                    return found
            return polynomial.cubic(*coeffs)
        return [to_number(r, self.settings) for r in polynomial.numeric_roots(coeffs)]

    def _by_coefficients(self, eq, depth):
        """Closed forms for ``eq`` read as a polynomial in the variable."""
        x = self.x
        try:
            coeffs = ex.coefficients(eq, x)
        except PolynomialError:
            coeffs = [eq]
        degree = len(coeffs) - 1

        if degree == 0:
            return self._exponential(eq)
        if degree == 1:
            return polynomial.linear(*coeffs)
        if degree == 2:
            return polynomial.quadratic(*coeffs)
        if degree == 3:
            return polynomial.cubic(*coeffs)
        if degree == 4:
            return polynomial.quartic(*coeffs)
        roots = polynomial.monomial_roots(eq, x)
        if roots:
            return roots
        return self._divide_and_conquer(eq, depth)

    def _exponential(self, eq):
        """Solve ``c*b**f(x) = r`` through logarithms."""
        x = self.x
        lhs, rhs = ex.separate(eq, x)
        coeff, part = ex.decompose(lhs, x)
        if isinstance(part, exp):
            base, exponent = sympy.E, part.args[0]
        elif isinstance(part, sympy.Pow) and x not in part.base.free_symbols:
            base, exponent = part.base, part.exp
        else:
            return Outcome.not_found()
        value = log(rhs / coeff) / log(base)
        a, f, b = ex.decompose_linear(exponent, x)
        if f != x:
            return Outcome.not_found()
        return [(value - b) / a]

    def _divide_and_conquer(self, eq, depth):
        """Factor *eq* and solve every factor holding the variable."""
        factored = factor(eq)
        found = []
        if isinstance(factored, Mul):
            for f in factored.args:
                if self.x in f.free_symbols:
                    found.extend(self.solve(f, depth + 1))
        return found

    def _by_rewrite(self, eq, depth):
        """Isolate the variable, then undo the function wrapping it."""
        x = self.x
        lhs, rhs = rewrite(eq, 0, x)
        if ex.is_function(lhs):
            coeff, func, arg = ex.unwrap_function(lhs)
            value = rhs / coeff
            if func is sympy.Abs:
                if arg == x:
                    return [value, -value]
                return self.solve(Equation(arg, value), depth + 1) \
                    + self.solve(Equation(arg, -value), depth + 1)
            if func in ex.INVERSE_FUNCTIONS:
                inverse = ex.INVERSE_FUNCTIONS[func](value)
                a, f, b = ex.decompose_linear(arg, x)
                if f == x:
                    return [(inverse - b) / a]
                return self.solve(Equation(arg, inverse), depth + 1)
            if func is log:
                return self.solve(Equation(arg, exp(value)), depth + 1)
            return Outcome.not_found()

        rewritten = Equation(lhs, rhs).to_lhs()
        # Heuristic stop: the rewrite made no progress.
        if rewritten == eq:
            raise RewriteError("Stopping. No stop condition exists")
        return self.solve(rewritten, depth + 1)

    def _power_base(self, eq):
        """Solve ``c*x**f = r`` for a symbolic exponent ``f``."""
        x = self.x
        lhs, rhs = ex.separate(eq, x)
        coeff, part = ex.decompose(lhs, x)
        if isinstance(part, sympy.Pow) and part.base == x and x not in part.exp.free_symbols:
            return [(rhs / coeff) ** (1 / part.exp)]
        return Outcome.not_found()
