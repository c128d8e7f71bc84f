"""
Structural view of SymPy expressions used by the solver.

SymPy nodes are immutable, so every helper here returns new expressions.
``kind_of`` folds SymPy's open class hierarchy into the closed set of
shapes the dispatcher and the rewriter reason about.
"""

import enum

import sympy
from sympy import Add, Function, Mul, Poly, Pow, S, Symbol, exp, log

# Trigonometric functions that make a result eligible for π-snapping.
TRIG_FUNCTIONS = (sympy.sin, sympy.cos, sympy.tan, sympy.cot, sympy.csc, sympy.sec)

# Functions with a closed-form inverse in the dispatcher.
INVERSE_FUNCTIONS = {
    sympy.sin: sympy.asin,
    sympy.cos: sympy.acos,
    sympy.tan: sympy.atan,
}


class Kind(enum.Enum):
    CONSTANT = "constant"
    VARIABLE = "variable"
    PRODUCT = "product"
    SUM = "sum"
    FUNCTION = "function"
    EXPONENTIAL = "exponential"


def as_symbol(variable) -> Symbol:
    """Accept a name or a Symbol and return the Symbol."""
    if isinstance(variable, Symbol):
        return variable
    return Symbol(str(variable))


def split_power(expr):
    """Return ``(base, exponent)`` when *expr* is raised to a numeric power."""
    if isinstance(expr, Pow) and expr.exp.is_number:
        return expr.base, expr.exp
    return expr, S.One


def kind_of(expr) -> Kind:
    """Classify *expr* into one of the solver's node kinds.

    A numeric coefficient never changes the kind, so ``-3*x**2`` is a
    VARIABLE and ``2*sin(x)`` is a FUNCTION.
    """
    expr = sympy.sympify(expr)
    if not expr.free_symbols:
        return Kind.CONSTANT
    if isinstance(expr, Add):
        return Kind.SUM
    if isinstance(expr, exp):
        return Kind.EXPONENTIAL
    if isinstance(expr, Pow):
        if not expr.exp.is_number:
            return Kind.EXPONENTIAL
        return _kind_of_base(expr.base)
    if isinstance(expr, Mul):
        coeff, rest = expr.as_coeff_Mul()
        if coeff is not S.One and not isinstance(rest, Mul):
            return kind_of(rest)
        return Kind.PRODUCT
    return _kind_of_base(expr)


def _kind_of_base(base) -> Kind:
    if isinstance(base, Symbol):
        return Kind.VARIABLE
    if isinstance(base, Add):
        return Kind.SUM
    if isinstance(base, Mul):
        return Kind.PRODUCT
    if isinstance(base, exp):
        return Kind.EXPONENTIAL
    if isinstance(base, Function):
        return Kind.FUNCTION
    if isinstance(base, Pow):
        return kind_of(base)
    return Kind.CONSTANT if not base.free_symbols else Kind.FUNCTION


def contains(expr, variable) -> bool:
    return as_symbol(variable) in sympy.sympify(expr).free_symbols


def variables(expr) -> list:
    """Sorted names of the free symbols of *expr*."""
    return sorted(str(s) for s in sympy.sympify(expr).free_symbols)


def terms(expr) -> tuple:
    return Add.make_args(sympy.sympify(expr))


def factors(expr) -> tuple:
    return Mul.make_args(sympy.sympify(expr))


def separate(expr, variable) -> tuple:
    """Split ``expr = 0`` into ``(terms with variable, -(terms without))``."""
    x = as_symbol(variable)
    dependent, independent = S.Zero, S.Zero
    for term in terms(expr):
        if x in term.free_symbols:
            dependent += term
        else:
            independent -= term
    return dependent, independent


def decompose(expr, variable) -> tuple:
    """Split a term into ``(coefficient, variable part)``.

    ``3*y*x**2`` gives ``(3*y, x**2)``.
    """
    x = as_symbol(variable)
    return sympy.sympify(expr).as_independent(x, as_Add=False)


def decompose_linear(expr, variable) -> tuple:
    """Split ``a*f + b`` into ``(a, f, b)`` with *f* carrying the variable."""
    x = as_symbol(variable)
    b, rest = sympy.sympify(expr).as_independent(x, as_Add=True)
    a, f = rest.as_independent(x, as_Add=False)
    return a, f, b


def monomial_power(term, variable):
    """Return ``(coefficient, power)`` when *term* is ``c*x**p``, else None."""
    x = as_symbol(variable)
    coeff, part = decompose(term, x)
    if part == x:
        return coeff, S.One
    base, power = split_power(part)
    if base == x and power.is_Rational:
        return coeff, power
    return None


def is_sqrt(expr, variable=None) -> bool:
    """True for ``sqrt(f)`` (optionally only when *f* contains *variable*)."""
    if not (isinstance(expr, Pow) and expr.exp == S.Half):
        return False
    return variable is None or contains(expr.base, variable)


def sqrt_part(term, variable):
    """Return ``(coefficient, sqrt node)`` for a term ``c*sqrt(f(x))``."""
    coeff, part = decompose(term, variable)
    if is_sqrt(part, variable):
        return coeff, part
    return None


def has_function_of(expr, variable) -> bool:
    """True when *variable* sits inside a function application.

    Exponentials (``exp(x)``, ``2**x``) do not count; the dispatcher solves
    those through their logarithm instead of by isolation.
    """
    x = as_symbol(variable)
    expr = sympy.sympify(expr)
    for node in sympy.preorder_traversal(expr):
        if isinstance(node, Function) and not isinstance(node, exp) \
                and x in node.free_symbols:
            return True
    return False


def has_trig(expr) -> bool:
    return sympy.sympify(expr).has(*TRIG_FUNCTIONS)


def has_log(expr) -> bool:
    return sympy.sympify(expr).has(log)


def is_polynomial(expr, variable) -> bool:
    return sympy.sympify(expr).is_polynomial(as_symbol(variable))


def coefficients(expr, variable) -> list:
    """Ascending polynomial coefficients of *expr* in *variable*.

    Raises ``sympy.PolynomialError`` when *expr* is not a polynomial in it.
    """
    poly = Poly(sympy.sympify(expr), as_symbol(variable))
    return list(reversed(poly.all_coeffs()))


def is_function(expr, func=None) -> bool:
    """True for ``c*f(...)`` with a numeric ``c`` (and ``f`` is *func*)."""
    _, rest = sympy.sympify(expr).as_coeff_Mul()
    if not isinstance(rest, Function) or isinstance(rest, exp):
        return False
    return func is None or rest.func is func


def unwrap_function(expr) -> tuple:
    """Split ``c*f(arg)`` into ``(c, f, arg)``."""
    coeff, rest = sympy.sympify(expr).as_coeff_Mul()
    return coeff, rest.func, rest.args[0]
