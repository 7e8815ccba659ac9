"""Text formatting helpers for CLI output."""

from decimal import Decimal
from typing import Optional


def format_amount(amount: Optional[Decimal]) -> str:
    """Format an optional amount, '-' when absent."""
    if amount is None:
        return "-"
    return f"${amount:,.2f}"


def format_balance(balance: Decimal) -> str:
    """Format a balance as an absolute amount with its CR/DR status."""
    status = "CR" if balance >= 0 else "DR"
    return f"${abs(balance):,.2f} {status}"
