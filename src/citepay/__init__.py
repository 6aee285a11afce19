"""Citation attribution and payment workflow."""
from .config import Config
from .errors import (
    CitePayError,
    InvalidAmountError,
    InvalidTransitionError,
    PaymentServiceError,
    PurposeTooLongError,
    StaleAttemptError,
    UnknownStyleError,
    ValidationError,
    WorkNotFoundError,
)
from .fees import FeeCalculator, compute_total
from .formatting import CitationFormatter, format_citation
from .models import (
    Author,
    CitationRequest,
    CitationStyle,
    PaymentAttempt,
    PaymentFailure,
    PaymentSuccess,
    Receipt,
    Work,
)
from .workflow import PaymentWorkflow, WorkflowSnapshot, WorkflowState

__version__ = "1.0.0"
__all__ = [
    "Config",
    "CitePayError",
    "InvalidAmountError",
    "InvalidTransitionError",
    "PaymentServiceError",
    "PurposeTooLongError",
    "StaleAttemptError",
    "UnknownStyleError",
    "ValidationError",
    "WorkNotFoundError",
    "FeeCalculator",
    "compute_total",
    "CitationFormatter",
    "format_citation",
    "Author",
    "CitationRequest",
    "CitationStyle",
    "PaymentAttempt",
    "PaymentFailure",
    "PaymentSuccess",
    "Receipt",
    "Work",
    "PaymentWorkflow",
    "WorkflowSnapshot",
    "WorkflowState",
]
