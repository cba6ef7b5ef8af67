"""Error types for retrocalc.

Evaluation errors are shown inline by the calculator and never touch the
stored history. Persistence errors are absorbed by the record store.
"""


class CalculatorError(Exception):
    """Base class for all calculator errors."""

    message = "Calculation failed"

    def __init__(self, message: str = ""):
        super().__init__(message or self.message)


class DivisionByZero(CalculatorError):
    """The expression divides by zero."""

    message = "Division by zero"


class InvalidExpression(CalculatorError):
    """The expression could not be parsed or evaluated."""

    message = "Invalid expression"


class PersistenceReadFailure(CalculatorError):
    """A stored value could not be decoded."""

    message = "Stored history could not be read"
