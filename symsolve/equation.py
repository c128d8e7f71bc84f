"""The ``lhs = rhs`` equation value and its canonical ``expr = 0`` form."""

import sympy
from sympy import I, expand, fraction, lcm, simplify, together

from symsolve import expression as ex
from symsolve.errors import ContradictionError
from symsolve.parsing import parse_expression, split_equation

# Upper bound on denominator-clearing passes in ``remove_denominators``.
_MAX_DENOM_PASSES = 8


class Equation:
    """An equation as a pair of SymPy expressions."""

    def __init__(self, lhs, rhs=0):
        lhs = sympy.sympify(lhs)
        rhs = sympy.sympify(rhs)
        if lhs.is_number and rhs.is_number and simplify(lhs - rhs) != 0:
            raise ContradictionError(f"{lhs} does not equal {rhs}")
        if (lhs == I) != (rhs == I):
            raise ContradictionError(f"{lhs} does not equal {rhs}")
        self.lhs = lhs
        self.rhs = rhs

    @classmethod
    def parse(cls, text: str) -> "Equation":
        """Build an equation from ``"lhs=rhs"``; a missing RHS means zero."""
        lhs_str, rhs_str = split_equation(text)
        return cls(parse_expression(lhs_str), parse_expression(rhs_str))

    def __str__(self) -> str:
        return f"{self.lhs}={self.rhs}"

    def __repr__(self) -> str:
        return f"Equation({self.lhs!r}, {self.rhs!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Equation):
            return NotImplemented
        return self.lhs == other.lhs and self.rhs == other.rhs

    def __hash__(self) -> int:
        return hash((self.lhs, self.rhs))

    def remove_denominators(self) -> "Equation":
        """Multiply both sides through until no symbolic denominator is left."""
        a, b = self.lhs, self.rhs
        den = lcm(fraction(together(a))[1], fraction(together(b))[1])
        a = expand(a * den)
        b = expand(b * den)

        # Terms such as 1/x can survive the expansion; clear them one at a time.
        for _ in range(_MAX_DENOM_PASSES):
            factor = _symbolic_denominator(a) or _symbolic_denominator(b)
            if factor is None:
                break
            a = expand(a * factor)
            b = expand(b * factor)
        return _unchecked(a, b)

    def to_lhs(self):
        """Return the canonical expression that equals zero."""
        eqn = self.remove_denominators()
        return expand(eqn.lhs - eqn.rhs)

    def is_zero(self) -> bool:
        return simplify(self.to_lhs()) == 0

    def sub(self, old, new) -> "Equation":
        return Equation(self.lhs.subs(old, new), self.rhs.subs(old, new))

    def variables(self) -> list:
        return sorted(set(ex.variables(self.lhs)) | set(ex.variables(self.rhs)))


def _unchecked(lhs, rhs) -> Equation:
    # Intermediate forms may legitimately read "0 = 5" before the caller
    # inspects them, so they skip the contradiction check.
    eqn = Equation.__new__(Equation)
    eqn.lhs, eqn.rhs = lhs, rhs
    return eqn


def _symbolic_denominator(expr):
    """Return the reciprocal of the first symbolic denominator in *expr*."""
    for term in ex.terms(expr):
        for factor in ex.factors(term):
            base, power = ex.split_power(factor)
            if base.free_symbols and power.is_negative:
                return base ** -power
    return None


def as_equation(value) -> Equation:
    """Coerce a string, Equation or expression to an Equation."""
    if isinstance(value, Equation):
        return value
    if isinstance(value, str):
        return Equation.parse(value)
    return Equation(value, 0)


def to_lhs(value):
    """Bring a string, Equation or expression to its ``expr = 0`` form.

    Plain expressions are returned unchanged.
    """
    if isinstance(value, (Equation, str)):
        return as_equation(value).to_lhs()
    return sympy.sympify(value)
