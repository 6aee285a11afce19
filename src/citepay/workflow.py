"""
Citation payment workflow.

State machine driving one "pay to cite" interaction:

    IDLE --open--> EDITING --submit--> SUBMITTING --success--> SUCCEEDED
                     ^                     |
                     |                  failure
                     +------retry------ FAILED

``reset()`` returns to IDLE from every state and is the only way state is
discarded. At most one payment is in flight per workflow; outcomes that
arrive for an attempt that was reset in the meantime are dropped.
"""
import asyncio
import logging
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from .clipboard import Clipboard
from .config import Config
from .errors import (
    InvalidAmountError,
    InvalidTransitionError,
    NoWorkLoadedError,
    PaymentServiceError,
    PurposeTooLongError,
    StaleAttemptError,
    UnknownStyleError,
    ValidationError,
)
from .fees import FeeCalculator
from .formatting import CitationFormatter
from .models import (
    CitationRequest,
    CitationStyle,
    FeeQuote,
    PaymentAttempt,
    PaymentFailure,
    PaymentOutcome,
    PaymentSuccess,
    Receipt,
    Work,
)
from .payments import PaymentService
from .utils.error_handling import sink_error_handler

logger = logging.getLogger(__name__)


class WorkflowState(Enum):
    IDLE = "idle"
    EDITING = "editing"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class WorkflowSnapshot:
    """Read-only view of the workflow handed to the presentation layer."""
    state: WorkflowState
    work: Optional[Work] = None
    request: Optional[CitationRequest] = None
    quote: Optional[FeeQuote] = None
    amount_error: Optional[InvalidAmountError] = None
    purpose_error: Optional[PurposeTooLongError] = None
    attempt: Optional[PaymentAttempt] = None
    receipt: Optional[Receipt] = None
    failure: Optional[PaymentFailure] = None

    @property
    def errors(self) -> List[ValidationError]:
        return [e for e in (self.amount_error, self.purpose_error) if e is not None]

    @property
    def can_submit(self) -> bool:
        return self.state == WorkflowState.EDITING and not self.errors

    @property
    def failure_reason(self) -> Optional[str]:
        return self.failure.reason if self.failure else None

    def to_dict(self) -> Dict[str, Any]:
        errors = {}
        if self.amount_error:
            errors["amount"] = {
                "constraint": self.amount_error.constraint,
                "message": self.amount_error.message,
            }
        if self.purpose_error:
            errors["purpose"] = {"message": self.purpose_error.message}
        return {
            "state": self.state.value,
            "work_id": self.work.identifier if self.work else None,
            "request": self.request.to_dict() if self.request else None,
            "quote": self.quote.to_dict() if self.quote else None,
            "errors": errors,
            "attempt": self.attempt.to_dict() if self.attempt else None,
            "receipt": self.receipt.to_dict() if self.receipt else None,
            "failure_reason": self.failure_reason,
        }


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@sink_error_handler
def _copy_text(clipboard: Clipboard, text: str) -> None:
    clipboard.copy(text)


class PaymentWorkflow:
    """Drives a citation payment from field entry to receipt."""

    def __init__(
        self,
        payment_service: PaymentService,
        formatter: Optional[CitationFormatter] = None,
        fee_calculator: Optional[FeeCalculator] = None,
        clipboard: Optional[Clipboard] = None,
        timeout: Optional[float] = None,
        clock: Callable[[], datetime] = _utcnow,
        default_style: Union[CitationStyle, str, None] = None,
    ):
        """
        Args:
            payment_service: Collaborator that settles each PaymentAttempt
            formatter: Citation formatter (default templates if None)
            fee_calculator: Fee calculator (configured network fee if None)
            clipboard: Sink for copied citations, optional
            timeout: Seconds to wait for the payment service (Config default)
            clock: Source of attempt timestamps
            default_style: Style preselected when the flow opens
        """
        self._payment_service = payment_service
        self._formatter = formatter or CitationFormatter()
        self._calculator = fee_calculator or FeeCalculator()
        self._clipboard = clipboard
        self._timeout = Config.PAYMENT_TIMEOUT_SECONDS if timeout is None else timeout
        self._clock = clock
        self._default_style = CitationStyle.parse(default_style or Config.DEFAULT_STYLE)
        self._clear()

    def _clear(self) -> None:
        self._state = WorkflowState.IDLE
        self._work: Optional[Work] = None
        self._request: Optional[CitationRequest] = None
        self._quote: Optional[FeeQuote] = None
        self._amount_error: Optional[InvalidAmountError] = None
        self._purpose_error: Optional[PurposeTooLongError] = None
        self._attempt: Optional[PaymentAttempt] = None
        self._receipt: Optional[Receipt] = None
        self._failure: Optional[PaymentFailure] = None

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def receipt(self) -> Optional[Receipt]:
        return self._receipt

    @property
    def work(self) -> Optional[Work]:
        return self._work

    def snapshot(self) -> WorkflowSnapshot:
        return WorkflowSnapshot(
            state=self._state,
            work=self._work,
            request=replace(self._request) if self._request else None,
            quote=self._quote,
            amount_error=self._amount_error,
            purpose_error=self._purpose_error,
            attempt=self._attempt,
            receipt=self._receipt,
            failure=self._failure,
        )

    def _require(self, operation: str, *states: WorkflowState) -> None:
        if self._state not in states:
            raise InvalidTransitionError(operation, self._state)

    def _transition(self, new_state: WorkflowState) -> None:
        logger.info(f"Citation flow {self._state.value} -> {new_state.value}")
        self._state = new_state

    def _apply_amount(self, value: Any) -> None:
        self._request.amount_input = "" if value is None else str(value)
        try:
            quote = self._calculator.quote(value)
        except InvalidAmountError as e:
            self._request.amount = None
            self._quote = None
            self._amount_error = e
            logger.info(f"Amount rejected ({e.constraint}): {value!r}")
        else:
            self._request.amount = quote.amount
            self._quote = quote
            self._amount_error = None

    # Editing

    def open_citation_flow(self, work: Work) -> WorkflowSnapshot:
        """Start a citation for ``work`` with the default fee and style."""
        self._require("open citation flow", WorkflowState.IDLE)
        self._work = work
        self._request = CitationRequest(
            amount_input=str(work.base_fee),
            amount=None,
            style=self._default_style,
        )
        self._apply_amount(work.base_fee)
        logger.info(f"Opened citation flow for work {work.identifier}")
        self._transition(WorkflowState.EDITING)
        return self.snapshot()

    def set_amount(self, value: Any) -> WorkflowSnapshot:
        self._require("set amount", WorkflowState.EDITING)
        self._apply_amount(value)
        return self.snapshot()

    def use_default_amount(self) -> WorkflowSnapshot:
        """Restore the work's base citation fee."""
        self._require("set amount", WorkflowState.EDITING)
        self._apply_amount(self._work.base_fee)
        return self.snapshot()

    def set_style(self, style: Union[CitationStyle, str]) -> WorkflowSnapshot:
        self._require("set style", WorkflowState.EDITING)
        resolved = CitationStyle.parse(style)
        if resolved not in self._formatter.styles:
            raise UnknownStyleError(style)
        self._request.style = resolved
        return self.snapshot()

    def set_purpose(self, text: Optional[str]) -> WorkflowSnapshot:
        self._require("set purpose", WorkflowState.EDITING)
        purpose = "" if text is None else str(text).strip()
        self._request.purpose = purpose
        limit = Config.PURPOSE_MAX_LENGTH
        self._purpose_error = PurposeTooLongError(len(purpose), limit) if len(purpose) > limit else None
        return self.snapshot()

    # Submission

    def begin_submission(self) -> Optional[PaymentAttempt]:
        """
        Validate the request and move to SUBMITTING.

        Returns:
            The new PaymentAttempt, or None when a payment is already in
            flight or the request does not validate (state stays EDITING).
        """
        if self._state == WorkflowState.SUBMITTING:
            logger.info("Submit ignored: payment already in flight")
            return None
        self._require("submit", WorkflowState.EDITING)

        self._apply_amount(self._request.amount_input)
        if self._amount_error or self._purpose_error:
            logger.info("Submit blocked by validation errors")
            return None

        attempt = PaymentAttempt(
            attempt_id=uuid.uuid4().hex,
            work_id=self._work.identifier,
            amount=self._quote.amount,
            network_fee=self._quote.network_fee,
            total=self._quote.total,
            payees=self._work.payees,
            style=self._request.style,
            purpose=self._request.purpose,
            timestamp=self._clock(),
        )
        if not attempt.payees:
            logger.warning(f"Work {self._work.identifier} has no verified authors to pay")

        self._attempt = attempt
        self._failure = None
        self._transition(WorkflowState.SUBMITTING)
        return attempt

    def complete_submission(self, attempt_id: str, outcome: PaymentOutcome) -> WorkflowSnapshot:
        """Apply the payment service's outcome for ``attempt_id``."""
        try:
            self._resolve(attempt_id, outcome)
        except StaleAttemptError as e:
            logger.debug(f"Discarding outcome: {e}")
        return self.snapshot()

    def _resolve(self, attempt_id: str, outcome: PaymentOutcome) -> None:
        current = self._attempt.attempt_id if self._attempt else None
        if self._state != WorkflowState.SUBMITTING or current != attempt_id:
            raise StaleAttemptError(attempt_id, current)

        if isinstance(outcome, PaymentSuccess):
            citation = self._formatter.format(self._work, self._work.authors, self._attempt.style)
            self._receipt = Receipt(
                attempt=self._attempt,
                receipt_id=outcome.receipt_id,
                citation=citation,
            )
            logger.info(f"Payment {attempt_id} succeeded: receipt {outcome.receipt_id}")
            self._transition(WorkflowState.SUCCEEDED)
            return

        if not isinstance(outcome, PaymentFailure):
            outcome = PaymentFailure(f"unexpected outcome: {outcome!r}")
        self._failure = outcome
        logger.warning(f"Payment {attempt_id} failed: {outcome.reason}")
        self._transition(WorkflowState.FAILED)

    async def call_payment_service(self, attempt: PaymentAttempt) -> PaymentOutcome:
        """Await the payment service once for ``attempt``, mapping every error to a PaymentFailure."""
        try:
            return await asyncio.wait_for(
                self._payment_service.submit(attempt),
                timeout=self._timeout or None,
            )
        except (asyncio.TimeoutError, TimeoutError):
            return PaymentFailure("timeout")
        except asyncio.CancelledError:
            self.complete_submission(attempt.attempt_id, PaymentFailure("cancelled"))
            raise
        except PaymentServiceError as e:
            return PaymentFailure(e.reason)
        except Exception as e:
            logger.error(f"Payment service error for {attempt.attempt_id}: {e}", exc_info=True)
            return PaymentFailure(str(e) or e.__class__.__name__)

    async def submit(self) -> WorkflowSnapshot:
        """Submit the current request and wait for its single outcome.

        Calling again while a payment is in flight is a no-op.
        """
        attempt = self.begin_submission()
        if attempt is None:
            return self.snapshot()
        outcome = await self.call_payment_service(attempt)
        return self.complete_submission(attempt.attempt_id, outcome)

    def retry_after_failure(self) -> WorkflowSnapshot:
        """Return to EDITING after a failed payment, keeping the entered fields."""
        self._require("retry", WorkflowState.FAILED)
        self._attempt = None
        self._failure = None
        self._transition(WorkflowState.EDITING)
        return self.snapshot()

    def reset(self) -> WorkflowSnapshot:
        """Discard everything and return to IDLE."""
        if self._state != WorkflowState.IDLE:
            logger.info(f"Citation flow reset from {self._state.value}")
        self._clear()
        return self.snapshot()

    close = reset

    # Citation text

    def get_formatted_citation(self, style: Union[CitationStyle, str, None] = None) -> str:
        """Citation for the loaded work, in ``style`` or the selected style."""
        if self._work is None:
            raise NoWorkLoadedError("No work is loaded")
        if style is None:
            style = self._request.style if self._request else self._default_style
        return self._formatter.format(self._work, self._work.authors, style)

    def copy_to_clipboard(self, text: Optional[str] = None) -> None:
        """Hand citation text to the clipboard collaborator."""
        if self._clipboard is None:
            logger.warning("No clipboard configured; nothing copied")
            return
        if text is None:
            text = self._receipt.citation if self._receipt else self.get_formatted_citation()
        _copy_text(self._clipboard, text)
