"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

from ledgerbook.domain.errors import InvalidAmount, invalid_amount

_CENTS = Decimal("0.01")


def parse_amount(amount) -> Decimal:
    """Parse a positive ledger amount into a two-place Decimal.

    Handles numbers and strings such as:
    - "123.45"
    - "$123.45"
    - "1,234.56"

    Args:
        amount: Decimal, int, float or amount string

    Returns:
        Decimal amount rounded to cents

    Raises:
        InvalidAmount: If the amount is not numeric or not positive
    """
    if isinstance(amount, bool) or amount is None:
        raise InvalidAmount(invalid_amount(amount))

    if isinstance(amount, str):
        text = amount.strip()
        # Remove currency symbols and thousands separators
        text = re.sub(r"[$€£¥]", "", text).replace(",", "").strip()
        if not text:
            raise InvalidAmount(invalid_amount(amount))
    elif isinstance(amount, (int, float, Decimal)):
        text = str(amount)
    else:
        raise InvalidAmount(invalid_amount(amount))

    try:
        value = Decimal(text)
        if not value.is_finite():
            raise InvalidAmount(invalid_amount(amount))
        value = value.quantize(_CENTS)
    except InvalidOperation:
        raise InvalidAmount(invalid_amount(amount))

    if value <= 0:
        raise InvalidAmount(invalid_amount(amount))
    return value
