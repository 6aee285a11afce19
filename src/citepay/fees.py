"""Citation fee validation and totals."""
from decimal import ROUND_HALF_EVEN, Context, Decimal, DecimalException, InvalidOperation, localcontext
from typing import Any, Optional

from .config import Config
from .errors import InvalidAmountError
from .models import FeeQuote

# Context for all money arithmetic, independent of the operands
MONEY_CONTEXT = Context(prec=34, rounding=ROUND_HALF_EVEN)


def parse_amount(value: Any, max_amount: Optional[Decimal] = None) -> Decimal:
    """
    Parse user input into a positive, finite Decimal.

    Args:
        value: Text, int, float or Decimal as entered by the user
        max_amount: Largest accepted amount (Config.MAX_AMOUNT by default)

    Returns:
        The parsed amount

    Raises:
        InvalidAmountError: with constraint "non-numeric", "non-finite",
            "non-positive" or "too-large"
    """
    # bool is an int subclass but never a meaningful amount
    if value is None or isinstance(value, bool):
        raise InvalidAmountError(InvalidAmountError.NON_NUMERIC, value)

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidAmountError(InvalidAmountError.NON_NUMERIC, value)
        try:
            amount = Decimal(text)
        except InvalidOperation:
            raise InvalidAmountError(InvalidAmountError.NON_NUMERIC, value)
    else:
        raise InvalidAmountError(InvalidAmountError.NON_NUMERIC, value)

    if not amount.is_finite():
        raise InvalidAmountError(InvalidAmountError.NON_FINITE, value)
    if amount <= 0:
        raise InvalidAmountError(InvalidAmountError.NON_POSITIVE, value)
    limit = Config.MAX_AMOUNT if max_amount is None else max_amount
    if amount > limit:
        raise InvalidAmountError(InvalidAmountError.TOO_LARGE, value)
    return amount


class FeeCalculator:
    """Adds the fixed network fee to a citation amount."""

    def __init__(
        self,
        network_fee: Optional[Decimal] = None,
        precision: Optional[int] = None,
        max_amount: Optional[Decimal] = None,
    ):
        self.network_fee = Decimal(str(network_fee)) if network_fee is not None else Config.NETWORK_FEE
        self.precision = precision if precision is not None else Config.DISPLAY_PRECISION
        self.max_amount = Decimal(str(max_amount)) if max_amount is not None else Config.MAX_AMOUNT

    def validate(self, value: Any) -> Decimal:
        return parse_amount(value, self.max_amount)

    def _exact_total(self, amount: Decimal) -> Decimal:
        try:
            with localcontext(MONEY_CONTEXT):
                return amount + self.network_fee
        except DecimalException:
            raise InvalidAmountError(InvalidAmountError.TOO_LARGE, amount)

    def _round(self, total: Decimal) -> Decimal:
        # Same rounding as round(total, precision)
        try:
            with localcontext(MONEY_CONTEXT):
                return total.quantize(Decimal(1).scaleb(-self.precision))
        except DecimalException:
            raise InvalidAmountError(InvalidAmountError.TOO_LARGE, total)

    def compute_total(self, amount: Any) -> Decimal:
        """Amount plus network fee, rounded to the display precision."""
        return self._round(self._exact_total(self.validate(amount)))

    def quote(self, amount: Any) -> FeeQuote:
        """Full fee breakdown, keeping the unrounded total."""
        parsed = self.validate(amount)
        total = self._exact_total(parsed)
        return FeeQuote(
            amount=parsed,
            network_fee=self.network_fee,
            total=total,
            display_total=self._round(total),
        )

    def format_amount(self, value: Decimal) -> str:
        """Display form, e.g. '₮5.05'."""
        return f"{Config.CURRENCY_SYMBOL}{self._round(value)}"


default_calculator = FeeCalculator()


def compute_total(amount: Any) -> Decimal:
    """Total payable for ``amount`` with the configured network fee."""
    return default_calculator.compute_total(amount)
