"""Runtime settings for ledgerbook, read from environment variables."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from ledgerbook.domain.entities import BalanceOrdering
from ledgerbook.domain.errors import ValidationError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"", "0", "false", "no", "off"}


@dataclass(frozen=True)
class LedgerSettings:
    """Settings shared by the CLI and the domain services."""

    database_path: Optional[str] = None
    allow_self_link: bool = False
    balance_ordering: BalanceOrdering = BalanceOrdering.DATE
    log_level: str = "WARNING"


def parse_bool(value: str) -> bool:
    """Parse an on/off environment value."""
    text = value.strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValidationError(f"Expected a boolean value, got '{value}'")


def parse_ordering(value: str) -> BalanceOrdering:
    """Parse a balance ordering name ('date' or 'number')."""
    try:
        return BalanceOrdering(value.strip().lower())
    except ValueError:
        raise ValidationError(f"Balance ordering must be 'date' or 'number', got '{value}'")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> LedgerSettings:
    """Load settings from LEDGERBOOK_* environment variables.

    Args:
        environ: Mapping to read instead of os.environ

    Raises:
        ValidationError: If a variable holds an unusable value
    """
    env = os.environ if environ is None else environ
    return LedgerSettings(
        database_path=env.get("LEDGERBOOK_DB_PATH") or None,
        allow_self_link=parse_bool(env.get("LEDGERBOOK_ALLOW_SELF_LINK", "")),
        balance_ordering=parse_ordering(env.get("LEDGERBOOK_BALANCE_ORDER", "date")),
        log_level=env.get("LEDGERBOOK_LOG_LEVEL", "WARNING").upper(),
    )
