"""Tests for booking request validation rules."""

from __future__ import annotations

from datetime import datetime

import pytest

from hotel_booking.domain.constraints import (
    validate_booking_request,
    validate_party_size,
    validate_search_keyword,
)
from hotel_booking.domain.errors import InvalidInputError, InvalidRangeError


FROM = datetime(2026, 1, 10, 10)
TO = datetime(2026, 1, 12, 10)


# --- party size ---

def test_positive_party_size_passes() -> None:
    validate_party_size(1)


def test_zero_party_size_raises() -> None:
    with pytest.raises(InvalidInputError):
        validate_party_size(0)


def test_negative_party_size_raises() -> None:
    with pytest.raises(InvalidInputError):
        validate_party_size(-3)


# --- booking request ---

def test_valid_request_returns_interval() -> None:
    interval = validate_booking_request(FROM, TO, 2)
    assert interval.start == FROM
    assert interval.end == TO


def test_inverted_range_is_reported_before_party_size() -> None:
    with pytest.raises(InvalidRangeError):
        validate_booking_request(TO, FROM, 0)


def test_bad_party_size_with_valid_range_raises() -> None:
    with pytest.raises(InvalidInputError):
        validate_booking_request(FROM, TO, 0)


# --- search keyword ---

def test_keyword_is_stripped() -> None:
    assert validate_search_keyword("  River ") == "River"


@pytest.mark.parametrize("keyword", [None, "", "   "])
def test_blank_keyword_raises(keyword) -> None:
    with pytest.raises(InvalidInputError, match="cannot be empty"):
        validate_search_keyword(keyword)
