from __future__ import annotations

from decimal import Decimal
from typing import Union

from .errors import (
    DateOrderViolation,
    DateOutOfRange,
    InvalidPrincipal,
    InvalidRate,
    NegativePrincipal,
    PrincipalTooLarge,
    RateTooHigh,
    SpanTooLarge,
)
from .models import Order
from .util.dates import day_span, decode_date
from .util.money import parse_amount, truncate_cents


MIN_DATE = 10000101
MAX_DATE = 99991231
MAX_SPAN_DAYS = 36500
PRINCIPAL_LIMIT = Decimal("100000000000")
RATE_LIMIT = Decimal("10")


def validate_and_derive_days(order: Order) -> int:
    """
    Check an order's dates and refresh its derived day count.

    Raises a DateError subclass without touching `order` when anything is off; on success
    `order.days` is overwritten and returned.
    """
    for field in ("save_date", "draw_date"):
        value = getattr(order, field)
        if value < MIN_DATE or value > MAX_DATE:
            raise DateOutOfRange(field, value)
    if order.save_date > order.draw_date:
        raise DateOrderViolation(order.save_date, order.draw_date)

    save = decode_date(order.save_date, "save_date")
    draw = decode_date(order.draw_date, "draw_date")

    days = day_span(save, draw)
    if days > MAX_SPAN_DAYS:
        raise SpanTooLarge(days, MAX_SPAN_DAYS)

    order.days = days
    return days


def normalize_principal(value: Union[str, int, Decimal]) -> Decimal:
    dec = truncate_cents(parse_amount(value))
    if dec < 0:
        raise NegativePrincipal(dec)
    if dec >= PRINCIPAL_LIMIT:
        raise PrincipalTooLarge(dec, PRINCIPAL_LIMIT)
    return dec


def normalize_rate(value: Union[str, int, float, Decimal], field: str = "interest_rate") -> Decimal:
    """
    Truncate an entered percentage to two places; anything above 10% is refused.

    Negative rates are accepted as entered.
    """
    if isinstance(value, float):
        value = str(value)
    try:
        dec = truncate_cents(parse_amount(value))
    except InvalidPrincipal:
        raise InvalidRate(field, value) from None
    if dec > RATE_LIMIT:
        raise RateTooHigh(field, dec, RATE_LIMIT)
    return dec
