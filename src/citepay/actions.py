"""Terminal actions for the citation payment menu."""
import asyncio
import logging
from typing import List

from .fees import FeeCalculator
from .formatting import CitationFormatter
from .models import CitationStyle, Receipt, Work
from .receipts import save_receipt_to_word
from .utils.error_handling import user_input_handler
from .utils.input_validation import InputValidator
from .utils.logging_setup import log_operation
from .workflow import PaymentWorkflow, WorkflowState


class CitationActions:
    """Action methods for handling user interactions."""

    def __init__(self, work: Work, workflow: PaymentWorkflow,
                 formatter: CitationFormatter = None, fee_calculator: FeeCalculator = None):
        self.work = work
        self.workflow = workflow
        self.formatter = formatter or CitationFormatter()
        self.calculator = fee_calculator or FeeCalculator()
        self.validator = InputValidator()
        self.receipts: List[Receipt] = []

    @user_input_handler
    def action_view_work(self) -> None:
        """Show the work and its authors."""
        print(f"\n{self.work.title}")
        print(f"{self.work.field} • {self.work.publication_date or 'n.d.'}")
        print(f"Citation fee: {self.calculator.format_amount(self.work.base_fee)}")
        print("Authors:")
        for author in self.work.authors:
            mark = " [verified]" if author.verified else ""
            print(f"  - {author.name}{mark} {author.payment_address}")

    @user_input_handler
    def action_view_citations(self) -> None:
        """Show the citation in every style."""
        print("\nCitation formats:")
        for style, citation in self.formatter.format_all(self.work).items():
            print(f"[{style.value}] {citation}")
            print(f"     In-text: {self.formatter.in_text_citation(self.work, style)}")

    @user_input_handler
    def action_copy_citation(self) -> None:
        """Copy a citation in the chosen style."""
        styles = list(CitationStyle)
        idx = self.validator.choose_option("\nCopy which style?", [s.value for s in styles])
        citation = self.formatter.format(self.work, self.work.authors, styles[idx])
        self.workflow.copy_to_clipboard(citation)
        print("Copied:", citation)

    def _edit_request(self) -> None:
        snapshot = self.workflow.snapshot()
        while True:
            current = snapshot.request.amount_input
            value = self.validator.get_text(f"Citation amount [{current}] ('default' for the paper's fee): ")
            if value.lower() == "default":
                snapshot = self.workflow.use_default_amount()
            elif value:
                snapshot = self.workflow.set_amount(value)
            if snapshot.amount_error is None:
                break
            print(snapshot.amount_error.message)

        styles = list(CitationStyle)
        default = styles.index(snapshot.request.style)
        idx = self.validator.choose_option("Citation style:", [s.value for s in styles], default)
        self.workflow.set_style(styles[idx])

        while True:
            snapshot = self.workflow.set_purpose(self.validator.get_text("Purpose (optional): "))
            if snapshot.purpose_error is None:
                break
            print(snapshot.purpose_error.message)

    def _print_summary(self) -> None:
        quote = self.workflow.snapshot().quote
        print(f"Citation Fee: {self.calculator.format_amount(quote.amount)}")
        print(f"Network Fee:  {self.calculator.format_amount(quote.network_fee)}")
        print(f"Total:        {self.calculator.format_amount(quote.total)}")

    @user_input_handler
    def action_pay_to_cite(self) -> None:
        """Run the pay-to-cite flow."""
        self.workflow.reset()
        self.workflow.open_citation_flow(self.work)
        try:
            while True:
                self._edit_request()
                self._print_summary()
                if not self.validator.confirm_action("Pay now?"):
                    print("Cancelled.")
                    return

                print("Processing...")
                snapshot = asyncio.run(self.workflow.submit())
                if snapshot.state == WorkflowState.SUCCEEDED:
                    receipt = snapshot.receipt
                    self.receipts.append(receipt)
                    log_operation("Pay to cite", f"receipt {receipt.receipt_id} for {self.work.identifier}")
                    print("Payment successful!")
                    print(f"Receipt: {receipt.receipt_id}")
                    print(f"Citation ({receipt.style.value}): {receipt.citation}")
                    if self.validator.confirm_action("Copy citation?"):
                        self.workflow.copy_to_clipboard()
                    return

                log_operation("Pay to cite", f"failed: {snapshot.failure_reason}", logging.WARNING)
                print(f"Payment failed: {snapshot.failure_reason}")
                if not self.validator.confirm_action("Try again?"):
                    return
                self.workflow.retry_after_failure()
        finally:
            self.workflow.reset()

    @user_input_handler
    def action_export_receipt(self) -> None:
        """Save the latest receipt as a Word document."""
        if not self.receipts:
            print("No receipts yet.")
            return
        path = save_receipt_to_word(self.receipts[-1], self.work, fee_calculator=self.calculator)
        log_operation("Receipt export", path)
        print("Saved to:", path)
