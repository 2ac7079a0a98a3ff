from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

from .calculator import AccrualResult
from .fingerprint import Fingerprint


logger = logging.getLogger(__name__)


class ResultCache:
    """
    In-memory fingerprint -> result memo.

    Results are a pure function of the fingerprint, so entries are never invalidated or evicted.
    Not thread-safe: only the owning session writes to it; the background worker never sees it.
    """

    def __init__(self) -> None:
        self._results: dict[Fingerprint, AccrualResult] = {}

    def __contains__(self, fp: object) -> bool:
        return fp in self._results

    def __len__(self) -> int:
        return len(self._results)

    def get(self, fp: Fingerprint) -> Optional[AccrualResult]:
        return self._results.get(fp)

    def insert(self, fp: Fingerprint, result: AccrualResult) -> None:
        # First write wins; a later write for the same key would carry the same values anyway.
        self._results.setdefault(fp, result)

    def merge(self, pairs: Iterable[Tuple[Fingerprint, AccrualResult]]) -> int:
        n = 0
        for fp, result in pairs:
            self.insert(fp, result)
            n += 1
        if n:
            logger.debug("Merged %d results into cache (size=%d)", n, len(self._results))
        return n
