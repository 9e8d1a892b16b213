"""Bounded-concurrency batch driver with per-item failure isolation."""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from cinematch.domain.model import ItemStatus

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from concurrent.futures import Future

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BatchItemResult[TResult]:
    index: int
    status: ItemStatus
    value: TResult | None = None
    error: str | None = None


@dataclass(slots=True)
class BatchReport[TResult]:
    """Per-item outcomes of a batch run, ordered by input position."""

    items: list[BatchItemResult[TResult]] = field(default_factory=list)

    def _with_status(self, status: ItemStatus) -> list[BatchItemResult[TResult]]:
        return [item for item in self.items if item.status is status]

    @property
    def succeeded(self) -> list[BatchItemResult[TResult]]:
        return self._with_status(ItemStatus.SUCCEEDED)

    @property
    def failed(self) -> list[BatchItemResult[TResult]]:
        return self._with_status(ItemStatus.FAILED)

    @property
    def skipped(self) -> list[BatchItemResult[TResult]]:
        return self._with_status(ItemStatus.SKIPPED)

    def summary(self) -> str:
        return (
            f"{len(self.succeeded)} succeeded, {len(self.failed)} failed, "
            f"{len(self.skipped)} skipped"
        )


class BatchRunner[TItem, TResult]:
    """Run ``handler`` over items on a fixed-size thread pool.

    At most ``workers`` items are in flight at once. Each worker thread waits
    locally so that its own consecutive handler calls are at least
    ``min_call_delay`` seconds apart. Calling ``stop()`` halts submission:
    items already running finish normally and the rest are reported as
    skipped. A handler exception only fails its own item.
    """

    def __init__(
        self,
        handler: Callable[[TItem], TResult],
        *,
        workers: int = 4,
        min_call_delay: float = 0.0,
        stop_event: threading.Event | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if workers < 1:
            raise ValueError(f"workers must be positive, got {workers}")
        self._handler = handler
        self._workers = workers
        self._min_call_delay = max(0.0, min_call_delay)
        self._stop = stop_event or threading.Event()
        self._sleep = sleep
        self._clock = clock
        self._local = threading.local()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def stop(self) -> None:
        self._stop.set()

    def run(self, items: Iterable[TItem]) -> BatchReport[TResult]:
        slots = threading.BoundedSemaphore(self._workers)
        futures: list[Future[BatchItemResult[TResult]]] = []
        skipped: list[BatchItemResult[TResult]] = []

        with ThreadPoolExecutor(
            max_workers=self._workers, thread_name_prefix="cinematch-batch"
        ) as executor:
            for index, item in enumerate(items):
                if not self._acquire(slots):
                    skipped.append(BatchItemResult(index=index, status=ItemStatus.SKIPPED))
                    continue
                future = executor.submit(self._run_one, index, item)
                future.add_done_callback(lambda _done: slots.release())
                futures.append(future)

        results = [future.result() for future in futures]
        report = BatchReport(items=sorted(results + skipped, key=lambda item: item.index))
        if self.stopped:
            log.warning("Batch stopped early: %s", report.summary())
        else:
            log.info("Batch finished: %s", report.summary())
        return report

    def _acquire(self, slots: threading.BoundedSemaphore) -> bool:
        if self._stop.is_set():
            return False
        slots.acquire()
        if self._stop.is_set():
            slots.release()
            return False
        return True

    def _run_one(self, index: int, item: TItem) -> BatchItemResult[TResult]:
        self._throttle()
        try:
            value = self._handler(item)
        except Exception as exc:
            log.exception("Batch item %d failed", index)
            return BatchItemResult(index=index, status=ItemStatus.FAILED, error=str(exc))
        return BatchItemResult(index=index, status=ItemStatus.SUCCEEDED, value=value)

    def _throttle(self) -> None:
        if self._min_call_delay <= 0:
            return
        now = self._clock()
        last_call: float | None = getattr(self._local, "last_call", None)
        if last_call is not None:
            remaining = self._min_call_delay - (now - last_call)
            if remaining > 0:
                self._sleep(remaining)
                now = self._clock()
        self._local.last_call = now
