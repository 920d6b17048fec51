"""Exceptions raised by intervalkit.

Both subclass ValueError so callers that already catch ValueError from
column checks keep working.
"""


class IntervalError(ValueError):
    """Base class for rejected interval/span input."""


class InvalidInterval(IntervalError):
    """An interval ends before it starts, a span does not exit after entry,
    or a required key/time value is missing.

    Raised once for the whole batch; no rows are processed.
    """


class DuplicateEntity(IntervalError):
    """A span set lists the same entity more than once."""
