"""
Exceptions raised by the design engine.

Only precondition violations are raised. An inadequate design is reported
through the ``checks`` of a ``DesignResult``, never as an exception.
"""


class RCDesignError(Exception):
    """Base class for all errors raised by rcdesign."""


class DesignInputError(RCDesignError, ValueError):
    """Raised when an input value violates a hard precondition.

    Attributes:
        field: Dotted path of the offending input field, e.g. ``geometry.width``
        message: Human-readable description of the problem
    """

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


def require_positive(field: str, value: float) -> float:
    """Return *value* if it is a finite number greater than zero."""
    if value is None or not value > 0 or value == float("inf"):
        raise DesignInputError(field, f"must be greater than zero, got {value!r}")
    return value


def require_non_negative(field: str, value: float) -> float:
    """Return *value* if it is a finite number greater than or equal to zero."""
    if value is None or not value >= 0 or value == float("inf"):
        raise DesignInputError(field, f"must not be negative, got {value!r}")
    return value
