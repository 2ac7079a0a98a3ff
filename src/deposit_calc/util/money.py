from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_DOWN, localcontext
from typing import Union

from ..errors import InvalidPrincipal


CENT = Decimal("0.01")


def parse_amount(value: Union[str, int, Decimal]) -> Decimal:
    """
    Parse values like:
    - "10000"
    - "10,000.00"
    - "1234.567"  (kept as-is here; callers decide how to round)
    """
    if isinstance(value, Decimal):
        dec = value
    elif isinstance(value, int):
        dec = Decimal(value)
    else:
        if value is None:
            raise InvalidPrincipal(value)
        s = value.strip().replace(",", "")
        if not s:
            raise InvalidPrincipal(value)
        try:
            dec = Decimal(s)
        except InvalidOperation:
            raise InvalidPrincipal(value) from None

    if not dec.is_finite():
        raise InvalidPrincipal(value)
    return dec


def truncate_cents(value: Decimal) -> Decimal:
    # Entered amounts never round up: 12.349 -> 12.34.
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(CENT, rounding=ROUND_DOWN)


def format_amount(value: Decimal) -> str:
    return f"{value.quantize(CENT):,.2f}"
