from __future__ import annotations

import logging
import time
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Union

from pydantic import ValidationError as ModelValidationError

from .cache import ResultCache
from .calculator import AccrualResult, compute
from .catalog import default_order, default_products
from .config import AppConfig
from .errors import InvalidProduct, ValidationError
from .fingerprint import Fingerprint
from .models import Order, Product
from .pipeline import ComputePipeline
from .validation import normalize_principal, normalize_rate, validate_and_derive_days


logger = logging.getLogger(__name__)

_RATE_FIELDS = ("interest_rate", "bonus_rate")


class CalculatorSession:
    """
    State behind one interactive calculator: an order, its product list, the result cache and
    (optionally) the background compute pipeline.

    Every edit revalidates the order and triggers recalculation. Validation problems are kept in
    `warning` instead of being raised, and the products keep their last-known-good values.
    Call `refresh()` once per display cycle to pick up results from the background worker.
    """

    def __init__(
        self,
        order: Optional[Order] = None,
        products: Optional[Iterable[Product]] = None,
        *,
        pipeline: Optional[ComputePipeline] = None,
        cache: Optional[ResultCache] = None,
    ) -> None:
        self.order = order if order is not None else default_order()
        self.products: List[Product] = list(products) if products is not None else default_products()
        self.cache = cache if cache is not None else ResultCache()
        self.warning: Optional[ValidationError] = None
        self._pipeline = pipeline
        self._in_flight: set[Fingerprint] = set()

    @classmethod
    def from_config(
        cls,
        cfg: AppConfig,
        order: Optional[Order] = None,
        products: Optional[Iterable[Product]] = None,
    ) -> "CalculatorSession":
        pipeline = ComputePipeline(max_workers=cfg.pipeline.max_workers) if cfg.pipeline.enabled else None
        if order is None:
            order = default_order(cfg.order.utc_offset_hours)
        return cls(order, products, pipeline=pipeline)

    def __enter__(self) -> "CalculatorSession":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        if self._pipeline is not None:
            self._pipeline.close()

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    # ---------- Edits ----------
    def set_principal(self, value: Union[str, int, Decimal]) -> None:
        try:
            principal = normalize_principal(value)
        except ValidationError as e:
            self._warn(e)
            return
        self.order.principal = principal
        self.recalculate()

    def set_save_date(self, value: int) -> None:
        self.order.save_date = int(value)
        self.recalculate()

    def set_draw_date(self, value: int) -> None:
        self.order.draw_date = int(value)
        self.recalculate()

    def update_product(self, index: int, **changes: Any) -> Product:
        """
        Apply field edits to one product and recalculate it.

        A rejected edit leaves the product untouched, sets `warning` and returns the current
        product.
        """
        current = self.products[index]
        try:
            for field in _RATE_FIELDS:
                if field in changes:
                    changes[field] = normalize_rate(changes[field], field)
            updated = Product.model_validate({**current.model_dump(), **changes})
        except ValidationError as e:
            self._warn(e)
            return current
        except ModelValidationError as e:
            self._warn(InvalidProduct(index, _describe(e)))
            return current
        self.products[index] = updated
        self.recalculate(index)
        return updated

    def add_product(self, product: Optional[Product] = None) -> int:
        """Append a product (a blank one by default), calculate it and return its index."""
        self.products.append(product if product is not None else Product())
        index = len(self.products) - 1
        self.recalculate(index)
        return index

    def remove_product(self, index: int) -> Product:
        # Cached results stay; another row may share the fingerprint.
        return self.products.pop(index)

    # ---------- Calculation ----------
    def recalculate(self, index: Optional[int] = None) -> None:
        """
        Revalidate the order, then bring one product (or all of them) up to date.

        Cached fingerprints are applied immediately; misses are computed inline when there is no
        pipeline, otherwise handed to the worker and picked up by a later refresh().
        """
        try:
            validate_and_derive_days(self.order)
        except ValidationError as e:
            self._warn(e)
            return
        self.warning = None

        targets = self.products if index is None else [self.products[index]]
        for product in targets:
            fp = Fingerprint.from_order_product(self.order, product)
            cached = self.cache.get(fp)
            if cached is not None:
                _apply(product, cached)
                continue

            if self._pipeline is None:
                result = compute(fp)
                self.cache.insert(fp, result)
                _apply(product, result)
            elif fp not in self._in_flight:
                self._in_flight.add(fp)
                self._pipeline.enqueue(fp)

    def refresh(self) -> int:
        """
        Merge finished background results into the cache and update the products that match.

        Never blocks. Returns the number of (fingerprint, result) pairs merged.
        """
        if self._pipeline is None:
            return 0

        pairs = self._pipeline.drain_results()
        for fp, result in pairs:
            self._in_flight.discard(fp)
            if result is None:
                logger.warning("No result for %s; it is retried on the next recalculation", fp)
        merged = self.cache.merge((fp, result) for fp, result in pairs if result is not None)

        if merged:
            for product in self.products:
                cached = self.cache.get(Fingerprint.from_order_product(self.order, product))
                if cached is not None:
                    _apply(product, cached)
        return merged

    def wait_idle(self, timeout: float = 5.0, poll_interval: float = 0.01) -> bool:
        """
        Keep refreshing until nothing is in flight. Returns False on timeout.
        """
        deadline = time.monotonic() + timeout
        while True:
            self.refresh()
            if not self._in_flight:
                return True
            if time.monotonic() >= deadline:
                logger.warning("Timed out waiting for %d in-flight computations", len(self._in_flight))
                return False
            time.sleep(poll_interval)

    def _warn(self, e: ValidationError) -> None:
        self.warning = e
        logger.info("Input rejected: %s", e)


def _apply(product: Product, result: AccrualResult) -> None:
    product.interest = result.interest
    product.bonus_interest = result.bonus_interest


def _describe(e: ModelValidationError) -> str:
    return "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())
