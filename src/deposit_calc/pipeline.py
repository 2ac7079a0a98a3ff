from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import Executor, ThreadPoolExecutor, as_completed
from typing import Callable, List, Optional, Tuple

from .calculator import AccrualResult, compute
from .fingerprint import Fingerprint


logger = logging.getLogger(__name__)

# A failed computation comes back paired with None.
Batch = List[Tuple[Fingerprint, Optional[AccrualResult]]]

_STOP = object()


class ComputePipeline:
    """
    Background worker that keeps accrual computation off the caller's thread.

    - `enqueue()` hands a fingerprint to the worker and returns immediately.
    - The worker blocks for the first fingerprint, drains whatever else is queued into one batch
      (dropping duplicates), fans the batch out over a thread pool and posts the results back
      as a single message.
    - `drain_results()` collects every finished batch without blocking. A fingerprint whose
      computation raised is returned with `None` in place of its result.

    The worker owns no cache; merging results is the caller's job.
    """

    def __init__(
        self,
        *,
        max_workers: Optional[int] = None,
        compute_fn: Callable[[Fingerprint], AccrualResult] = compute,
    ) -> None:
        self._outbound: "queue.Queue[object]" = queue.Queue()
        self._inbound: "queue.Queue[Batch]" = queue.Queue()
        self._max_workers = max_workers or None
        self._compute = compute_fn
        self._closed = False
        self._thread = threading.Thread(target=self._run, name="deposit-calc-worker", daemon=True)
        self._thread.start()

    def __enter__(self) -> "ComputePipeline":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def enqueue(self, fp: Fingerprint) -> None:
        if self._closed:
            raise RuntimeError("ComputePipeline is closed")
        self._outbound.put(fp)

    def drain_results(self) -> Batch:
        out: Batch = []
        while True:
            try:
                out.extend(self._inbound.get_nowait())
            except queue.Empty:
                return out

    def close(self, timeout: Optional[float] = None) -> None:
        """
        Stop the worker once it has finished everything already enqueued.

        Results computed before shutdown stay available through drain_results().
        """
        if self._closed:
            return
        self._closed = True
        self._outbound.put(_STOP)
        self._thread.join(timeout)

    @property
    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def _next_batch(self) -> Tuple[List[Fingerprint], bool]:
        pending = [self._outbound.get()]
        while True:
            try:
                pending.append(self._outbound.get_nowait())
            except queue.Empty:
                break

        stop = any(item is _STOP for item in pending)
        # dict.fromkeys keeps arrival order while coalescing duplicates.
        batch = list(dict.fromkeys(item for item in pending if item is not _STOP))
        return batch, stop  # type: ignore[return-value]

    def _compute_batch(self, pool: Executor, batch: List[Fingerprint]) -> Batch:
        futures = {pool.submit(self._compute, fp): fp for fp in batch}
        out: Batch = []
        for fut in as_completed(futures):
            fp = futures[fut]
            try:
                out.append((fp, fut.result()))
            except Exception:
                logger.exception("Accrual computation failed for fingerprint %s", fp)
                out.append((fp, None))
        return out

    def _run(self) -> None:
        logger.debug("Compute worker started (max_workers=%s)", self._max_workers)
        with ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="deposit-calc") as pool:
            while True:
                batch, stop = self._next_batch()
                if batch:
                    logger.debug("Computing batch of %d fingerprints", len(batch))
                    self._inbound.put(self._compute_batch(pool, batch))
                if stop:
                    break
        logger.debug("Compute worker stopped")
