"""Text → SymPy glue for equations such as ``"x^2 - 4 = 0"``."""

import re

import sympy
from sympy import E, I, Symbol, pi
from sympy.parsing.sympy_parser import (
    parse_expr, standard_transformations, implicit_multiplication_application,
    convert_xor, rationalize,
)

from symsolve.errors import ParseError

TRANSFORMATIONS = standard_transformations + (
    implicit_multiplication_application,
    convert_xor,
    rationalize,  # "0.5" becomes Rational(1, 2) so solving stays exact
)

# Names that must never be split into single-letter variables.
_LOCALS = {
    "e": E,
    "E": E,
    "i": I,
    "pi": pi,
    "abs": sympy.Abs,
    "log": sympy.log,
    "ln": sympy.log,
    "sqrt": sympy.sqrt,
    "exp": sympy.exp,
    "sin": sympy.sin,
    "cos": sympy.cos,
    "tan": sympy.tan,
    "cot": sympy.cot,
    "sec": sympy.sec,
    "csc": sympy.csc,
    "asin": sympy.asin,
    "acos": sympy.acos,
    "atan": sympy.atan,
}


def normalize(text: str) -> str:
    """Map the Unicode symbols and bracket styles users type to ASCII."""
    text = text.replace('√', 'sqrt')
    text = text.replace('π', '(pi)')
    text = text.replace('−', '-')
    text = text.replace('[', '(').replace(']', ')')
    text = text.replace('{', '(').replace('}', ')')
    return text


def validate_characters(text: str) -> None:
    """Reject input containing characters outside the allowed set.

    Allowed: letters, digits, whitespace, underscores and the math symbols
    + - * / ^ = ( ) . ,
    """
    allowed = set("abcdefghijklmnopqrstuvwxyz"
                  "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
                  "0123456789"
                  " \t_+-*/^=().,π√")
    bad = {ch for ch in text if ch not in allowed}
    if bad:
        bad_sorted = " ".join(sorted(bad))
        raise ParseError(
            f"Invalid character(s): {bad_sorted}\n"
            f"Only letters, numbers, and math symbols "
            f"(+ - * / ^ = ( ) .) are allowed."
        )


def parse_expression(text: str, variables=()) -> sympy.Expr:
    """Parse one side of an equation into a SymPy expression.

    *variables* are names that should always be read as a single symbol
    (so ``"ab"`` stays one variable when ``"ab"`` is listed).
    """
    s = normalize(str(text)).strip()
    if not s:
        raise ParseError("Expression is empty.")
    validate_characters(s)
    local = dict(_LOCALS)
    for name in variables:
        local[str(name)] = Symbol(str(name))
    try:
        return parse_expr(s.replace('^', '**'), local_dict=local,
                          transformations=TRANSFORMATIONS)
    except Exception as e:
        raise ParseError(f"Could not parse expression: '{text}'. Error: {e}") from e


def split_equation(text: str) -> tuple:
    """Split ``"lhs=rhs"`` into its two sides; a missing RHS means zero."""
    parts = normalize(str(text)).split('=')
    if len(parts) > 2:
        raise ParseError("Equation must contain at most one '=' sign.")
    lhs = parts[0].strip()
    rhs = parts[1].strip() if len(parts) == 2 else ""
    if not lhs:
        raise ParseError("The left side of the equation is empty.")
    return lhs, rhs or "0"


def split_system(text: str) -> list:
    """Split ``"x + y = 3, x - y = 1"`` into individual equations."""
    return [eq.strip() for eq in re.split(r'\s*[;,]\s*', text) if eq.strip()]
