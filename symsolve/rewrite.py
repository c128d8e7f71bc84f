"""Isolation of a variable: turn ``expr = 0`` into ``isolated = other``."""

import sympy
from sympy import Add, Function, Mul, S, expand

from symsolve import expression as ex
from symsolve.errors import RewriteError

# Each pass strips at least one layer, so this only trips on cycles.
_MAX_STEPS = 50


def rewrite(expr, other=None, variable="x", _steps: int = 0) -> tuple:
    """Move everything not containing *variable* to the other side.

    Returns ``(isolated, other_side)`` where *isolated* is a function
    application, a power of the variable or a polynomial in it.  Raises
    ``RewriteError`` when none of the rewriting rules applies.
    """
    if _steps > _MAX_STEPS:
        raise RewriteError(f"Could not isolate {variable} in {expr}")
    x = ex.as_symbol(variable)
    expr = sympy.sympify(expr)
    other = S.Zero if other is None else sympy.sympify(other)

    if isinstance(expr, Add):
        expr, other = _isolate_sqrt(expr, other, x)
    else:
        expr = expand(expr)

    if isinstance(expr, Add) and x in expr.free_symbols:
        dependent = S.Zero
        count = 0
        for term in expr.args:
            if x in term.free_symbols:
                count += 1
                dependent += term
            else:
                other -= term
        # Not every term carried the variable, e.g. a*x**2 + x + c.
        if count != len(expr.args):
            return rewrite(dependent, other, x, _steps + 1)
        return dependent, other

    if isinstance(expr, Mul) and x in expr.free_symbols:
        coeff, _ = expr.as_coeff_Mul()
        if coeff.is_negative:
            return rewrite(-expr, -other, x, _steps + 1)
        if other == 0:
            return expr, other
        dependent, independent = S.One, S.One
        for factor in expr.args:
            if x in factor.free_symbols:
                dependent *= factor
            else:
                independent *= factor
        if independent == 1:
            return expr, other
        return rewrite(dependent, other / independent, x, _steps + 1)

    base, power = ex.split_power(expr)
    if power != 1 and x in expr.free_symbols:
        inverse = 1 / power
        return rewrite(base, expand(other) ** inverse, x, _steps + 1)

    if isinstance(expr, Function) or ex.kind_of(expr) in (ex.Kind.VARIABLE, ex.Kind.EXPONENTIAL) \
            or ex.is_polynomial(expr, x):
        return expr, other

    raise RewriteError(f"Could not isolate {variable} in {expr}")


def _isolate_sqrt(expr, other, x) -> tuple:
    """Square away a lone ``sqrt(f(x))`` term of a sum.

    ``sqrt(f) + g = other`` becomes ``f = (other - g)**2``; sums with zero
    or several square roots of the variable are returned unchanged.
    """
    roots, rest = [], []
    for term in expr.args:
        if ex.sqrt_part(term, x) is not None:
            roots.append(term)
        else:
            rest.append(term)
    if len(roots) != 1:
        return expr, other
    other = expand((other - Add(*rest)) ** 2)
    return expand(roots[0] ** 2), other
