from __future__ import annotations

from datetime import date

import pytest

from deposit_calc.errors import DateOutOfRange, InvalidDay, InvalidMonth
from deposit_calc.models import TermUnit
from deposit_calc.util.dates import advance, day_span, decode_date, encode_date


def test_decode_date_basic() -> None:
    assert decode_date(20240229) == date(2024, 2, 29)
    assert decode_date(10000101) == date(1000, 1, 1)
    assert decode_date(99991231) == date(9999, 12, 31)


@pytest.mark.parametrize("value,month", [(20231301, 13), (20230015, 0)])
def test_decode_date_rejects_bad_month(value: int, month: int) -> None:
    with pytest.raises(InvalidMonth) as ei:
        decode_date(value, "save_date")
    assert ei.value.month == month
    assert "save_date" in str(ei.value)


@pytest.mark.parametrize("value", [20230229, 20230132, 20230100, 20230431])
def test_decode_date_rejects_bad_day(value: int) -> None:
    with pytest.raises(InvalidDay):
        decode_date(value, "draw_date")


def test_decode_date_rejects_year_zero() -> None:
    with pytest.raises(DateOutOfRange):
        decode_date(1231)


def test_encode_date_inverts_decode() -> None:
    assert encode_date(date(2024, 2, 29)) == 20240229
    assert encode_date(decode_date(19991231)) == 19991231


def test_day_span_is_signed_and_leap_aware() -> None:
    assert day_span(date(2023, 1, 1), date(2024, 1, 1)) == 365
    assert day_span(date(2024, 1, 1), date(2025, 1, 1)) == 366
    assert day_span(date(2024, 3, 1), date(2024, 2, 28)) == -2
    assert day_span(date(2023, 5, 5), date(2023, 5, 5)) == 0


def test_day_span_matches_date_subtraction() -> None:
    a, b = decode_date(20000101), decode_date(20991207)
    assert day_span(a, b) == (b - a).days == 36500


def test_advance_days_is_unclamped() -> None:
    assert advance(date(2023, 12, 25), TermUnit.DAY, 7) == date(2024, 1, 1)
    assert advance(date(2024, 2, 28), TermUnit.DAY, 1) == date(2024, 2, 29)


def test_advance_month_clamps_day_of_month() -> None:
    assert advance(date(2024, 1, 31), TermUnit.MONTH, 1) == date(2024, 2, 29)
    assert advance(date(2023, 1, 31), TermUnit.MONTH, 1) == date(2023, 2, 28)
    assert advance(date(2023, 8, 31), TermUnit.MONTH, 1) == date(2023, 9, 30)
    # Year rollover
    assert advance(date(2023, 10, 31), TermUnit.MONTH, 3) == date(2024, 1, 31)
    assert advance(date(2023, 1, 31), TermUnit.MONTH, 13) == date(2024, 2, 29)
    assert advance(date(2023, 12, 15), TermUnit.MONTH, 12) == date(2024, 12, 15)


def test_advance_year_clamps_leap_day() -> None:
    assert advance(date(2024, 2, 29), TermUnit.YEAR, 1) == date(2025, 2, 28)
    assert advance(date(2024, 2, 29), TermUnit.YEAR, 4) == date(2028, 2, 29)
    assert advance(date(2023, 6, 30), TermUnit.YEAR, 3) == date(2026, 6, 30)


def test_advance_saturates_past_year_9999() -> None:
    assert advance(date(9999, 12, 30), TermUnit.DAY, 7) == date.max
    assert advance(date(9999, 6, 1), TermUnit.MONTH, 12) == date.max
    assert advance(date(9999, 6, 1), TermUnit.YEAR, 1) == date.max
