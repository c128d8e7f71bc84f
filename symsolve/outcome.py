"""Result of one exploratory solving strategy.

Strategies never raise into the dispatcher: they report what they found,
that they found nothing, or the exception that stopped them, and the
dispatcher decides what to try next.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)

FOUND = "found"
NOT_FOUND = "not_found"
ERROR = "error"


@dataclass(frozen=True)
class Outcome:
    status: str
    values: tuple = ()
    error: Optional[BaseException] = field(default=None, compare=False)

    @classmethod
    def found(cls, values) -> "Outcome":
        values = tuple(values)
        return cls(FOUND, values) if values else cls(NOT_FOUND)

    @classmethod
    def not_found(cls) -> "Outcome":
        return cls(NOT_FOUND)

    @classmethod
    def failed(cls, error: BaseException) -> "Outcome":
        return cls(ERROR, error=error)

    @property
    def ok(self) -> bool:
        return self.status == FOUND

    @property
    def kind(self) -> Optional[str]:
        """Name of the exception class for failed outcomes."""
        return type(self.error).__name__ if self.error is not None else None


def attempt(name: str, strategy, *args) -> Outcome:
    """Run *strategy* and wrap whatever it produces in an Outcome.

    The strategy may return an iterable of values or an Outcome; any
    exception is captured and logged at DEBUG under *name*.
    """
    try:
        result = strategy(*args)
    except Exception as e:
        logger.debug("Strategy %s failed: %s", name, e, exc_info=True)
        return Outcome.failed(e)
    if isinstance(result, Outcome):
        return result
    if result is None:
        return Outcome.not_found()
    return Outcome.found(result)
