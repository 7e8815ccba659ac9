"""Tests for environment-based settings."""

import pytest

from ledgerbook.config import LedgerSettings, load_settings, parse_bool, parse_ordering
from ledgerbook.domain.entities import BalanceOrdering
from ledgerbook.domain.errors import ValidationError


def test_defaults_with_empty_environment():
    settings = load_settings({})

    assert settings == LedgerSettings()
    assert settings.allow_self_link is False
    assert settings.balance_ordering is BalanceOrdering.DATE
    assert settings.log_level == "WARNING"


def test_reads_environment_variables():
    settings = load_settings(
        {
            "LEDGERBOOK_DB_PATH": "/tmp/books.db",
            "LEDGERBOOK_ALLOW_SELF_LINK": "yes",
            "LEDGERBOOK_BALANCE_ORDER": "Number",
            "LEDGERBOOK_LOG_LEVEL": "debug",
        }
    )

    assert settings.database_path == "/tmp/books.db"
    assert settings.allow_self_link is True
    assert settings.balance_ordering is BalanceOrdering.NUMBER
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("value, expected", [("1", True), ("ON", True), ("off", False), ("", False)])
def test_parse_bool(value, expected):
    assert parse_bool(value) is expected


def test_parse_bool_rejects_garbage():
    with pytest.raises(ValidationError):
        parse_bool("maybe")


def test_parse_ordering_rejects_unknown():
    with pytest.raises(ValidationError):
        parse_ordering("alphabetical")
