from __future__ import annotations

import argparse
import logging
import os
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .catalog import default_order, default_products
from .config import load_config
from .errors import ValidationError
from .logging_config import configure_logging
from .models import Product, RenewalPolicy, TermUnit
from .session import CalculatorSession
from .util.dates import decode_date
from .util.money import format_amount
from .validation import normalize_rate


logger = logging.getLogger("deposit_calc")


def _rate(value: str) -> Decimal:
    try:
        rate = Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a decimal rate: {value!r}") from None
    if not rate.is_finite():
        raise argparse.ArgumentTypeError(f"rate must be a finite number: {value!r}")
    return rate


def _term(value: str) -> int:
    try:
        term = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a whole number: {value!r}") from None
    if term < 0:
        raise argparse.ArgumentTypeError(f"term cannot be negative: {value!r}")
    return term


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="deposit-calc")
    p.add_argument(
        "--env-file",
        default=".env",
        help="Path to a dotenv file (default: .env). If missing, env vars must already be set.",
    )
    p.add_argument("--config", default="config.yaml", help="Path to YAML config (default: config.yaml, optional)")

    sub = p.add_subparsers(dest="cmd", required=True)

    calc = sub.add_parser("calc", help="Compute interest + bonus interest for an order")
    calc.add_argument("--principal", required=True, help="Deposit amount, e.g. 10000 or 10,000.00")
    calc.add_argument("--save-date", type=int, default=0, help="Deposit date YYYYMMDD (default: today)")
    calc.add_argument("--draw-date", type=int, default=0, help="Withdrawal date YYYYMMDD (default: one year later)")
    calc.add_argument(
        "--term",
        type=_term,
        default=None,
        help="Compute a single product with this term length instead of the default catalog",
    )
    calc.add_argument("--unit", choices=[u.value for u in TermUnit], default=TermUnit.DAY.value)
    calc.add_argument("--rate", type=_rate, default=Decimal("0"), help="Interest rate in percent")
    calc.add_argument("--bonus-rate", type=_rate, default=Decimal("0"), help="Bonus rate in percent")
    calc.add_argument("--renew", choices=[r.value for r in RenewalPolicy], default=RenewalPolicy.NO_RENEW.value)
    calc.add_argument("--sync", action="store_true", help="Compute inline instead of on the background worker")

    sub.add_parser("catalog", help="List the default products")

    return p


def _print_products(products: List[Product]) -> None:
    for i, product in enumerate(products):
        print(
            f"{i:>2}) {product.term_label:<10} rate={product.interest_rate}% "
            f"bonus={product.bonus_rate}% {product.renewal_policy.label():<27} "
            f"interest={format_amount(product.interest)} bonus_interest={format_amount(product.bonus_interest)}"
        )


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    env_path = Path(args.env_file)
    if env_path.exists():
        load_dotenv(env_path)

    # Default logging: can be overridden once config is loaded.
    configure_logging(level=os.getenv("LOG_LEVEL", "INFO"))

    cfg = load_config(args.config)
    configure_logging(
        level=cfg.logging.level,
        file_path=cfg.logging.file_path or None,
        calculator_level=cfg.logging.calculator_level,
    )

    if args.cmd == "catalog":
        for product in default_products():
            print(f"{product.term_label}\t{product.interest_rate}%\t{product.bonus_rate}%\t{product.renewal_policy.label()}")
        return 0

    if args.cmd == "calc":
        if args.sync:
            cfg = cfg.model_copy(update={"pipeline": cfg.pipeline.model_copy(update={"enabled": False})})

        try:
            save = decode_date(args.save_date, "save_date") if args.save_date else None
        except ValidationError as e:
            print(f"error: {e}", file=sys.stderr)
            return 2
        order = default_order(cfg.order.utc_offset_hours, today=save)
        if args.draw_date:
            order.draw_date = args.draw_date

        if args.term is not None:
            try:
                products = [
                    Product(
                        term=args.term,
                        term_unit=TermUnit(args.unit),
                        interest_rate=normalize_rate(args.rate, "interest_rate"),
                        bonus_rate=normalize_rate(args.bonus_rate, "bonus_rate"),
                        renewal_policy=RenewalPolicy(args.renew),
                    )
                ]
            except ValidationError as e:
                print(f"error: {e}", file=sys.stderr)
                return 2
        else:
            products = default_products()

        with CalculatorSession.from_config(cfg, order, products) as session:
            session.set_principal(args.principal)
            if session.warning is not None:
                print(f"error: {session.warning}", file=sys.stderr)
                return 2
            if not session.wait_idle(timeout=30.0):
                print("error: timed out waiting for results", file=sys.stderr)
                return 1

            logger.debug("Computed %d products (cache size=%d)", len(session.products), len(session.cache))
            print(f"principal={format_amount(session.order.principal)} save_date={order.save_date} "
                  f"draw_date={order.draw_date} days={order.days}")
            _print_products(session.products)
        return 0

    raise SystemExit(f"unknown command: {args.cmd}")
