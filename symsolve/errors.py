"""Exception types raised by the solver.

Every error derives from ``ValueError`` so callers that already guard
user input with ``except ValueError`` (the HTTP layer, the CLI) keep
working unchanged.
"""


class SolveError(ValueError):
    """Base class for all solver errors."""


class ParseError(SolveError):
    """The equation text could not be turned into an expression."""


class ContradictionError(SolveError):
    """An equation asserts that two different constants are equal."""


class SingularSystemError(SolveError):
    """A linear system has no distinct solution."""


class RewriteError(SolveError):
    """The target variable could not be isolated."""
