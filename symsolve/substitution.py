"""Substitution checks for candidate solutions.

Given an equation like ``2x + 1 = 7`` and values like ``x = 3``, this
module substitutes the values and reports whether the equation holds.
The dispatcher uses the same machinery to reject spurious roots
introduced by squaring or by fractional-power corrections.
"""

import re

import sympy
from sympy import Symbol, simplify

from symsolve.equation import as_equation
from symsolve.errors import ParseError
from symsolve.parsing import parse_expression

# Residual below which a numeric substitution counts as zero.
TOLERANCE = 1e-9


def _parse_values(values_str: str) -> dict:
    """Parse a user-supplied values string like ``x = 3, y = 4``.

    Returns a dict mapping variable names to SymPy values.
    """
    assignments = re.split(r'\s*[,;]\s*', values_str.strip())
    result = {}
    for assignment in assignments:
        assignment = assignment.strip()
        if not assignment:
            continue
        if '=' not in assignment:
            raise ParseError(
                f"Invalid value format: '{assignment}'. "
                f"Expected format: variable = value (e.g. x = 3)"
            )
        var_name, val_str = (p.strip() for p in assignment.split('=', 1))
        if not var_name or not val_str:
            raise ParseError(
                f"Invalid value format: '{assignment}'. "
                f"Both variable name and value are required."
            )
        if not var_name.isidentifier():
            raise ParseError(f"Invalid variable name '{var_name}'.")
        result[var_name] = parse_expression(val_str)
    if not result:
        raise ParseError(
            "No values provided. Enter values like: x = 3  or  x = 3, y = 4"
        )
    return result


def bind(values) -> dict:
    """Turn a ``name -> value`` mapping (or a values string) into subs."""
    if isinstance(values, str):
        values = _parse_values(values)
    return {Symbol(str(k)) if not isinstance(k, Symbol) else k: sympy.sympify(v)
            for k, v in dict(values).items()}


def residual(expr, values):
    """Numeric value of *expr* with *values* substituted, or None."""
    subs = bind(values)
    try:
        return complex(sympy.N(sympy.sympify(expr).subs(subs)))
    except (TypeError, ValueError):
        return None


def is_root(expr, variable, value, tolerance: float = TOLERANCE) -> bool:
    """True when substituting ``variable = value`` makes *expr* vanish.

    Symbolic values that cannot be evaluated numerically are accepted:
    there is nothing to check them against.
    """
    r = residual(expr, {variable: value})
    if r is None:
        return True
    scale = residual(value, {})
    return abs(r) <= tolerance * max(1.0, abs(scale) if scale is not None else 1.0)


def check_solution(equation, values) -> dict:
    """Substitute *values* into *equation* and report whether it holds.

    *equation* may be a string, an Equation or an expression equal to
    zero; *values* a mapping or a string like ``"x = 3, y = 4"``.
    """
    eqn = as_equation(equation)
    subs = bind(values)
    missing = [v for v in eqn.variables() if Symbol(v) not in subs]
    if missing:
        raise ParseError(
            f"Missing value(s) for variable(s): {', '.join(missing)}. "
            f"Please provide values for all variables in the equation."
        )
    lhs = simplify(eqn.lhs.subs(subs))
    rhs = simplify(eqn.rhs.subs(subs))
    diff = simplify(lhs - rhs)
    if diff == 0:
        holds = True
    else:
        try:
            holds = abs(complex(sympy.N(diff))) <= TOLERANCE
        except (TypeError, ValueError):
            holds = False
    return {"holds": holds, "lhs": lhs, "rhs": rhs}
