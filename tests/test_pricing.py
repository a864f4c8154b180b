from datetime import date, datetime
from decimal import Decimal

import pytest

from errors import ValidationError
from pricing import add_days, days_between, parse_iso_date, round_currency, start_of_day, today


def test_days_between_counts_calendar_days():
    assert days_between(date(2026, 10, 19), date(2026, 10, 22)) == 3


def test_days_between_has_a_one_day_minimum():
    assert days_between(date(2026, 10, 19), date(2026, 10, 19)) == 1
    assert days_between(date(2026, 10, 19), date(2026, 10, 10)) == 1


def test_days_between_rounds_partial_days_up():
    assert days_between(datetime(2026, 10, 19, 8), datetime(2026, 10, 20, 9)) == 2


@pytest.mark.parametrize("amount, expected", [
    (Decimal("2.675"), Decimal("2.68")),
    (2.675, Decimal("2.68")),
    (Decimal("2.674"), Decimal("2.67")),
    (150, Decimal("150.00")),
    (Decimal("-1.005"), Decimal("-1.01")),
])
def test_round_currency_rounds_half_up_to_cents(amount, expected):
    assert round_currency(amount) == expected


@pytest.mark.parametrize("amount", [0.1 + 0.2, 19.999, Decimal("33.3333"), 1e6 / 3])
def test_round_currency_is_idempotent(amount):
    once = round_currency(amount)
    assert round_currency(once) == once


def test_start_of_day_strips_time():
    assert start_of_day(datetime(2026, 10, 19, 23, 59)) == date(2026, 10, 19)
    assert start_of_day(date(2026, 10, 19)) == date(2026, 10, 19)


def test_today_uses_injected_clock():
    assert today(lambda: datetime(2030, 1, 2, 15, 30)) == date(2030, 1, 2)


def test_add_days_crosses_month_boundary():
    assert add_days(date(2026, 10, 30), 3) == date(2026, 11, 2)
    assert add_days(date(2026, 11, 1), -3) == date(2026, 10, 29)


def test_parse_iso_date_accepts_iso_strings():
    assert parse_iso_date("2026-10-19") == date(2026, 10, 19)
    assert parse_iso_date(" 2026-10-19 ") == date(2026, 10, 19)


@pytest.mark.parametrize("value", [
    "19/10/2026", "2026-13-01", "", "tomorrow", "20261019", "2026-W43-1", "2026-1-05",
])
def test_parse_iso_date_rejects_malformed_input(value):
    with pytest.raises(ValidationError, match="startDate"):
        parse_iso_date(value, "startDate")
