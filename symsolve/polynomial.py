"""
Closed-form polynomial root formulas.

Coefficients are passed in ascending order (constant first), the order
``expression.coefficients`` produces, and may be symbolic.  Every formula
returns exact SymPy expressions; numeric evaluation is left to the caller.
"""

import numpy as np
import sympy
from sympy import I, Rational, S, expand, sqrt

from symsolve import expression as ex

_CUBE_ROOT = Rational(1, 3)


def linear(c, a) -> list:
    """Root of ``a*x + c = 0``."""
    return [-sympy.sympify(c) / sympy.sympify(a)]


def quadratic(c, b, a) -> list:
    """Roots of ``a*x**2 + b*x + c = 0`` (complex roots included)."""
    a, b, c = map(sympy.sympify, (a, b, c))
    det = sqrt(b**2 - 4*a*c)
    return [(-b + det) / (2*a), (-b - det) / (2*a)]


def _probe(expr):
    """Evaluate *expr* numerically with every free symbol set to 1."""
    expr = sympy.sympify(expr)
    scope = {s: 1 for s in expr.free_symbols}
    try:
        return complex(sympy.N(expr.subs(scope)))
    except (TypeError, ValueError):
        return None


def _is_zero(expr) -> bool:
    value = _probe(expr)
    return value is not None and abs(value) < 1e-12


def cubic(d, c, b, a) -> list:
    """Roots of ``a*x**3 + b*x**2 + c*x + d = 0`` by Cardano's method.

    ``C`` is a principal cube root; when both ``D0`` and ``C`` vanish the
    other sign of ``Q`` is used so that ``C`` can divide.  If that is zero
    too the cubic has a triple root.
    """
    a, b, c, d = map(sympy.sympify, (a, b, c, d))
    d0 = b**2 - 3*a*c
    d1 = 2*b**3 - 9*a*b*c + 27*a**2*d
    q = sqrt(d1**2 - 4*d0**3)
    big_c = ((q + d1) / 2) ** _CUBE_ROOT

    if _is_zero(d0) and _is_zero(big_c):
        big_c = ((-q + d1) / 2) ** _CUBE_ROOT
        if _is_zero(big_c):
            return [-b / (3*a)]

    return [
        -(b / (3*a)) - big_c / (3*a) - d0 / (3*a*big_c),
        -(b / (3*a)) + big_c * (1 + I*sqrt(3)) / (6*a) + (1 - I*sqrt(3)) * d0 / (6*a*big_c),
        -(b / (3*a)) + big_c * (1 - I*sqrt(3)) / (6*a) + (1 + I*sqrt(3)) * d0 / (6*a*big_c),
    ]


def quartic(e, d, c, b, a) -> list:
    """Roots of ``a*x**4 + b*x**3 + c*x**2 + d*x + e = 0``.

    Uses the depressed quartic ``p``/``q`` together with the resolvent
    quantities ``D0``, ``D1``, ``Q`` and ``S``; the roots are the two pairs
    ``-b/4a ∓ S ± sqrt(...)/2``.
    """
    a, b, c, d, e = map(sympy.sympify, (a, b, c, d, e))
    p = (8*a*c - 3*b**2) / (8*a**2)
    q = (b**3 - 4*a*b*c + 8*a**2*d) / (8*a**3)
    d0 = c**2 - 3*b*d + 12*a*e
    d1 = 2*c**3 - 9*b*c*d + 27*b**2*e + 27*a*d**2 - 72*a*c*e
    radical = sqrt(d1**2 - 4*d0**3)
    big_q = ((d1 + radical) / 2) ** _CUBE_ROOT
    if _is_zero(big_q):
        big_q = ((d1 - radical) / 2) ** _CUBE_ROOT
    shift = -b / (4*a)
    if _is_zero(big_q):
        # D0 = D1 = 0: a triple root t and a simple root -3t of the depressed
        # quartic, or one root of multiplicity four when p vanishes.
        if _is_zero(p):
            return [shift]
        t = -3*q / (4*p)
        return [shift + t, shift - 3*t]

    # A vanishing S divides below; another cube root of unity avoids it.
    # A radicand on the negative real axis sits on the branch cut of sqrt,
    # where each numeric evaluation of S may pick a different sign.
    omega = (-1 + I*sqrt(3)) / 2
    s = on_cut = None
    for rotation in (S.One, omega, omega**2):
        rotated = big_q * rotation
        radicand = -Rational(2, 3)*p + (rotated + d0/rotated) / (3*a)
        value = _probe(radicand)
        if value is None:
            s = sqrt(radicand) / 2
            break
        if abs(value) < 1e-12:
            continue
        if value.real < 0 and abs(value.imag) <= 1e-9 * abs(value):
            if on_cut is None:
                on_cut = I*sqrt(-radicand) / 2
            continue
        s = sqrt(radicand) / 2
        break
    if s is None:
        s = on_cut
    if s is None:
        if not _is_zero(q):
            return []
        # Biquadratic: y**4 + p*y**2 + r = 0 with y = x - shift.
        r = (-3*b**4 + 256*a**3*e - 64*a**2*b*d + 16*a*b**2*c) / (256*a**4)
        ys = [sqrt(y2) for y2 in quadratic(r, p, 1)]
        return [shift + y for y in ys] + [shift - y for y in ys]

    minus = sqrt(-4*s**2 - 2*p + q/s) / 2
    plus = sqrt(-4*s**2 - 2*p - q/s) / 2
    return [shift - s + minus, shift - s - minus, shift + s + plus, shift + s - plus]


# ── Numeric polynomial roots ────────────────────────────────────────────

def numeric_roots(coeffs) -> list:
    """All complex roots of a polynomial with numeric ascending *coeffs*."""
    desc = [complex(sympy.N(c)) for c in reversed(list(coeffs))]
    if all(abs(c.imag) == 0 for c in desc):
        desc = [c.real for c in desc]
    while desc and desc[0] == 0:
        desc.pop(0)
    if len(desc) < 2:
        return []
    return [complex(r) for r in np.roots(desc)]


def integer_roots(coeffs):
    """Numeric roots when every one of them is an integer, else None."""
    roots = numeric_roots(coeffs)
    if not roots:
        return None
    result = []
    for r in roots:
        if abs(r.imag) > 1e-9 or abs(r.real - round(r.real)) > 1e-9:
            return None
        result.append(int(round(r.real)))
    return result


def monomial_roots(expr, variable) -> list:
    """The ``n`` complex roots of ``a*x**n + b = 0``.

    Returns an empty list unless *expr* has exactly that shape with an
    integer ``n >= 1``.
    """
    x = ex.as_symbol(variable)
    term, rest = S.Zero, S.Zero
    for t in ex.terms(expand(expr)):
        if x in t.free_symbols:
            if term != 0:
                return []
            term = t
        else:
            rest += t
    shape = ex.monomial_power(term, x) if term != 0 else None
    if shape is None:
        return []
    a, n = shape
    if not (n.is_Integer and n > 0):
        return []
    r = (-rest / a) ** (1 / n)
    return [r * sympy.exp(2 * k * sympy.pi * I / n) for k in range(int(n))]
