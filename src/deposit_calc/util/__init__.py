from .dates import advance, day_span, decode_date, encode_date
from .money import format_amount, parse_amount, truncate_cents

__all__ = [
    "advance",
    "day_span",
    "decode_date",
    "encode_date",
    "format_amount",
    "parse_amount",
    "truncate_cents",
]
