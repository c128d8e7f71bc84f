"""Numeric (approximate) root finding for single-variable equations.

The expression is compiled with ``lambdify`` into a NumPy function,
sampled on a grid around zero to bracket sign changes, and each bracket
is refined with Newton-Raphson.
"""

import logging
import math

import numpy as np
import sympy
from sympy import diff, lambdify

from symsolve import expression as ex
from symsolve.results import round_significant
from symsolve.settings import SolveSettings

logger = logging.getLogger(__name__)

EPSILON = np.finfo(float).eps


def compile_function(expr, variable):
    """Compile *expr* into a real-valued function of one float.

    Values with a non-zero imaginary part and domain errors come back as
    NaN so the scan treats them as the end of the usable range.
    """
    x = ex.as_symbol(variable)
    fn = lambdify(x, sympy.sympify(expr), modules="numpy")

    def f(value):
        with np.errstate(all="ignore"):
            try:
                result = complex(fn(value))
            except (ValueError, ZeroDivisionError, OverflowError, TypeError):
                return math.nan
        if abs(result.imag) > 1e-12:
            return math.nan
        return result.real

    return f


def _sample(f, xs) -> np.ndarray:
    return np.array([f(float(v)) for v in xs], dtype=float)


def _sign_changes(xs, values, limit: int) -> list:
    """Midpoints of sign changes in *values*, stopping at the first NaN/inf."""
    finite = np.isfinite(values)
    if not finite.all():
        stop = int(np.argmin(finite))
        xs, values = xs[:stop], values[:stop]
    signs = np.sign(values)
    changes = np.nonzero(signs[1:] != signs[:-1])[0]
    return [float((xs[i] + xs[i + 1]) / 2) for i in changes[:limit]]


def get_points(f, step: float, settings: SolveSettings, has_log: bool = False) -> list:
    """Candidate seeds for Newton's method.

    Samples ``f`` at ``k*step`` for ``k`` in ``[0, search_radius)`` on the
    right and ``(-search_radius, 0]`` on the left, recording the midpoint
    of every sign change, at most ``roots_per_side`` per side.  A few
    hints around the origin are always included.
    """
    points = [0.0]
    f0 = f(0.0)
    if math.isfinite(f0):
        start = round(f0)
        points.extend([math.floor(start / 2), abs(start), start])
    if has_log:
        # log is undefined at 0; a point just right of it is a good start.
        points.append(0.1)

    # A singularity at the origin must not end the scan before it starts.
    first = 0 if math.isfinite(f0) else 1
    radius = settings.search_radius
    right = np.arange(first, radius) * step
    left = -np.arange(first, radius) * step
    points.extend(_sign_changes(right, _sample(f, right), settings.roots_per_side))
    points.extend(_sign_changes(left, _sample(f, left), settings.roots_per_side))
    return points


def newton(point: float, f, fp, settings: SolveSettings):
    """Refine *point* with Newton-Raphson.

    Returns the root, or None when the iteration cap is reached, the
    derivative vanishes or an iterate stops being finite.
    """
    x0 = float(point)
    for _ in range(settings.max_newton_iterations):
        fx0 = f(x0)
        if fx0 == 0:
            return x0
        slope = fp(x0)
        if not (math.isfinite(fx0) and math.isfinite(slope)) or slope == 0:
            return None
        x = x0 - fx0 / slope
        if not math.isfinite(x):
            return None
        if abs(x - x0) <= 4 * EPSILON * max(1.0, abs(x)):
            return x
        x0 = x
    return None


def find_roots(expr, variable, settings: SolveSettings) -> list:
    """Real roots of ``expr = 0`` found by scanning plus Newton refinement.

    The scan is repeated for every step in ``settings.step_sizes`` since a
    coarse grid can jump over a narrow sign change.  Roots are rounded to
    ``settings.significant_digits`` and returned sorted without repeats.
    """
    # A real symbol keeps derivatives such as d|x|/dx = sign(x) printable.
    x = sympy.Symbol(ex.as_symbol(variable).name, real=True)
    expr = sympy.sympify(expr).subs(ex.as_symbol(variable), x)
    f = compile_function(expr, x)
    fp = compile_function(diff(expr, x), x)
    has_log = ex.has_log(expr)

    points = []
    for step in settings.step_sizes or (settings.step_size,):
        for p in get_points(f, step, settings, has_log):
            if p not in points:
                points.append(p)

    roots = set()
    for p in points:
        root = newton(p, f, fp, settings)
        if root is None:
            continue
        root = round_significant(root, settings.significant_digits)
        if root == 0:
            root = 0.0
        roots.add(root)
    logger.debug("Numeric scan of %s: %d seeds, %d roots", expr, len(points), len(roots))
    return sorted(roots)
