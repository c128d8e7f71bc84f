"""Solution accumulation, π-snapping and numeric formatting."""

import math

import sympy
from sympy import Float, Integer, Rational, pi

from symsolve.settings import SolveSettings

# π-snapping accepts n·π/d only with |n| and d below this bound.
_PI_LIMIT = 10
_PI_TOLERANCE = 1e-9


# ── Numeric helpers ─────────────────────────────────────────────────────

def round_significant(value: float, digits: int) -> float:
    """Round *value* to *digits* significant decimal digits."""
    if value == 0 or not math.isfinite(value):
        return value
    return float(f"{value:.{digits}g}")


def to_number(value, settings: SolveSettings):
    """Turn a Python/NumPy float or complex into a SymPy number.

    Integer-valued floats become exact integers so ``3.0`` and ``3``
    deduplicate; everything else is rounded to the configured number of
    significant digits.
    """
    value = complex(value)
    real = _clean_float(value.real, settings)
    imag = _clean_float(value.imag, settings)
    if imag == 0:
        return real
    return real + imag * sympy.I


def _clean_float(value: float, settings: SolveSettings):
    if abs(value - round(value)) < 1e-12:
        return Integer(int(round(value)))
    return Float(round_significant(value, settings.significant_digits),
                 settings.significant_digits)


def _fmt_num(value: float, max_decimals: int = 10) -> str:
    """Format a float into a clean decimal string.

    - Removes trailing zeros after the decimal point.
    - Uses up to *max_decimals* digits of precision.
    - Returns integers without a decimal point (e.g. ``7`` not ``7.0``).
    """
    if abs(value - round(value)) < 1e-12:
        return str(int(round(value)))
    formatted = f"{value:.{max_decimals}f}".rstrip("0").rstrip(".")
    return formatted


def format_numeric(value) -> str:
    """Convert a SymPy expression to its numeric (decimal) string."""
    try:
        f = complex(sympy.N(value))
    except (TypeError, ValueError):
        return str(value)
    if abs(f.imag) > 1e-12:
        sign = "-" if f.imag < 0 else "+"
        return f"{_fmt_num(f.real)} {sign} {_fmt_num(abs(f.imag))}i"
    return _fmt_num(f.real)


def snap_to_pi(value):
    """Return ``n*pi/d`` when *value* is such a multiple with small n, d."""
    try:
        ratio = float(value) / math.pi
    except (TypeError, ValueError):
        return value
    if not math.isfinite(ratio):
        return value
    approx = Rational(ratio).limit_denominator(_PI_LIMIT - 1)
    if abs(float(approx) - ratio) > _PI_TOLERANCE:
        return value
    if abs(approx.p) >= _PI_LIMIT or approx.q >= _PI_LIMIT:
        return value
    return approx * pi


def _is_nan(value) -> bool:
    if value is None or value is sympy.nan:
        return True
    if isinstance(value, float):
        return math.isnan(value)
    return False


# ── Solution set ────────────────────────────────────────────────────────

class SolutionSet:
    """Ordered, duplicate-free collection of solutions.

    Duplicates are detected on the string form of each value, NaN
    candidates are dropped and, when *has_trig* is set and the settings
    allow it, numeric values are snapped to rational multiples of π.
    """

    def __init__(self, settings: SolveSettings, has_trig: bool = False):
        self.settings = settings
        self.has_trig = has_trig
        self._values = []
        self._seen = set()

    def add(self, value) -> None:
        if isinstance(value, (list, tuple, SolutionSet)):
            for item in value:
                self.add(item)
            return
        if _is_nan(value):
            return
        if isinstance(value, (int, float, complex)) and not isinstance(value, bool):
            value = to_number(value, self.settings)
        value = sympy.sympify(value)
        if value.has(sympy.nan, sympy.zoo):
            return
        if self.has_trig and self.settings.pi_conversions and value.is_Float:
            value = snap_to_pi(value)
        key = str(value)
        if key in self._seen:
            return
        self._seen.add(key)
        self._values.append(value)

    def extend(self, values) -> None:
        for value in values:
            self.add(value)

    def map(self, func) -> None:
        """Replace every value with ``func(value)``, keeping uniqueness."""
        values, self._values, self._seen = self._values, [], set()
        self.extend(func(v) for v in values)

    def keep(self, predicate) -> None:
        values, self._values, self._seen = self._values, [], set()
        self.extend(v for v in values if predicate(v))

    def __iter__(self):
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __bool__(self) -> bool:
        return bool(self._values)

    def to_list(self) -> list:
        return list(self._values)
