"""Error types raised by the calculator services."""


class CalculatorError(Exception):
    """Base class for calculator errors."""


class UnavailableError(CalculatorError):
    """The ingredient source could not be reached or parsed."""


class SubmissionError(CalculatorError):
    """A new ingredient could not be stored by the spreadsheet service."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
