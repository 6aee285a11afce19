"""Error types for the citation payment workflow."""
from typing import Any, Optional


class CitePayError(Exception):
    """Base class for all citepay errors."""


class ValidationError(CitePayError):
    """User input failed validation. Recovered locally, never fatal."""


class InvalidAmountError(ValidationError):
    """Citation amount is non-numeric, non-finite, not positive or too large."""

    NON_NUMERIC = "non-numeric"
    NON_FINITE = "non-finite"
    NON_POSITIVE = "non-positive"
    TOO_LARGE = "too-large"

    def __init__(self, constraint: str, value: Any = None):
        self.constraint = constraint
        self.value = value
        super().__init__(constraint)

    @property
    def message(self) -> str:
        if self.constraint == self.NON_NUMERIC:
            return "Amount must be a number"
        if self.constraint == self.NON_FINITE:
            return "Amount must be a finite number"
        if self.constraint == self.NON_POSITIVE:
            return "Amount must be greater than zero"
        if self.constraint == self.TOO_LARGE:
            return "Amount is too large"
        return f"Invalid amount ({self.constraint})"


class PurposeTooLongError(ValidationError):
    """Purpose note exceeds the configured length limit."""

    def __init__(self, length: int, limit: int):
        self.length = length
        self.limit = limit
        super().__init__(f"Purpose is {length} characters long (limit {limit})")

    @property
    def message(self) -> str:
        return f"Purpose must be at most {self.limit} characters"


class UnknownStyleError(CitePayError, ValueError):
    """Requested citation style is not one of the supported styles."""

    def __init__(self, style: Any):
        self.style = style
        super().__init__(f"Unknown citation style: {style!r}")


class InvalidTransitionError(CitePayError):
    """Operation is not allowed in the workflow's current state."""

    def __init__(self, operation: str, state: Any):
        self.operation = operation
        self.state = state
        super().__init__(f"Cannot {operation} while workflow is {getattr(state, 'value', state)}")


class NoWorkLoadedError(CitePayError):
    """A citation was requested before any work was opened."""


class StaleAttemptError(CitePayError):
    """Outcome arrived for an attempt that is no longer in flight."""

    def __init__(self, attempt_id: str, current_id: Optional[str] = None):
        self.attempt_id = attempt_id
        self.current_id = current_id
        super().__init__(f"Attempt {attempt_id} is no longer in flight")


class PaymentServiceError(CitePayError):
    """Raised by payment adapters when a submission cannot be completed."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class WorkRepositoryError(CitePayError):
    """Work metadata could not be retrieved."""


class WorkNotFoundError(WorkRepositoryError, KeyError):
    """No work exists with the requested identifier."""

    def __init__(self, work_id: str):
        self.work_id = work_id
        super().__init__(f"Work not found: {work_id}")

    def __str__(self) -> str:
        return f"Work not found: {self.work_id}"
