"""Tests for date parser with relative dates."""

import pytest
from datetime import date, timedelta
from ledgerbook.utils.date_parser import parse_date


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    result = parse_date("2024-07-23")
    assert result == date(2024, 7, 23)


def test_parse_written_date():
    result = parse_date("July 23, 2024")
    assert result == date(2024, 7, 23)


def test_parse_today():
    """Test parsing 'today'."""
    result = parse_date("Today")
    assert result == date.today()


def test_parse_yesterday():
    """Test parsing 'yesterday'."""
    result = parse_date("yesterday")
    assert result == date.today() - timedelta(days=1)


def test_parse_tomorrow():
    """Test parsing 'tomorrow'."""
    result = parse_date("tomorrow")
    assert result == date.today() + timedelta(days=1)


def test_parse_invalid_date():
    """Test that invalid dates raise ValueError."""
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date")
