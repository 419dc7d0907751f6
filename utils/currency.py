from decimal import Decimal, InvalidOperation

from utils.errors import InvalidAmountInput

ZERO = Decimal("0")
CENTS = Decimal("0.01")


def to_decimal(value) -> Decimal:
    """Coerce a stored number (str, int, float or Decimal) to Decimal.

    Floats go through str() so 0.1 stays 0.1 instead of its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        value = repr(value)
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidAmountInput(f"Not a number: {value!r}") from None
    if not result.is_finite():
        raise InvalidAmountInput(f"Not a finite number: {value!r}")
    return result


def parse_amount(text: str) -> Decimal:
    """Parse user-entered amount text, e.g. '12,50' or '1234.56'.

    A comma is accepted as the decimal separator. Raises InvalidAmountInput for
    empty, non-numeric or negative input.
    """
    if text is None or not str(text).strip():
        raise InvalidAmountInput("Amount cannot be empty.")
    amount = to_decimal(str(text).strip().replace(",", "."))
    if amount < 0:
        raise InvalidAmountInput("Amount must be 0 or greater.")
    return amount.quantize(CENTS)


def format_signed(amount: Decimal) -> str:
    """Format with +/- sign, used in log lines."""
    sign = "+" if amount >= 0 else "-"
    return f"{sign}{abs(amount):,.2f}"
