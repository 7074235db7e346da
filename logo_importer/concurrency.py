"""
Bounded parallel execution over an ordered batch of items.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")

ProgressCallback = Callable[[int, int], None]

DEFAULT_CONCURRENCY_LIMIT = 15


class ProgressCounter:
    """
    Thread-safe completed-items counter that reports every increment.
    """

    def __init__(self, *, total: int, on_progress: ProgressCallback | None = None) -> None:
        self._total = total
        self._completed = 0
        self._on_progress = on_progress
        self._lock = threading.Lock()

    @property
    def completed(self) -> int:
        with self._lock:
            return self._completed

    def increment(self) -> int:
        with self._lock:
            self._completed += 1
            if self._on_progress is not None:
                self._on_progress(self._completed, self._total)
            return self._completed


@dataclass(frozen=True)
class BoundedRunResult(Generic[R]):
    """
    Per-index results; slots for items never dispatched stay None.
    """

    results: list[R | None]
    dispatched: int
    completed: int
    cancelled: bool


def run_bounded(
    items: Sequence[T],
    worker: Callable[[T], R],
    *,
    limit: int = DEFAULT_CONCURRENCY_LIMIT,
    on_progress: ProgressCallback | None = None,
    cancel_event: threading.Event | None = None,
    thread_name_prefix: str = "bounded",
) -> BoundedRunResult[R]:
    """
    Run `worker` over `items` with at most `limit` calls in flight.

    Each result lands at its item's index, so output order matches input order
    whatever the completion order. Setting `cancel_event` stops further
    dispatch; in-flight calls run to completion. Exceptions escaping `worker`
    are re-raised once every dispatched call has finished.
    """

    limit = max(1, limit)
    results: list[R | None] = [None] * len(items)
    counter = ProgressCounter(total=len(items), on_progress=on_progress)
    gate = threading.BoundedSemaphore(limit)
    futures: list[Future[None]] = []
    cancelled = False

    def run_slot(index: int, item: T) -> None:
        try:
            results[index] = worker(item)
        finally:
            counter.increment()

    with ThreadPoolExecutor(max_workers=limit, thread_name_prefix=thread_name_prefix) as executor:
        for index, item in enumerate(items):
            gate.acquire()
            if cancel_event is not None and cancel_event.is_set():
                gate.release()
                cancelled = True
                break
            future = executor.submit(run_slot, index, item)
            future.add_done_callback(lambda _done: gate.release())
            futures.append(future)

    for future in futures:
        future.result()

    return BoundedRunResult(
        results=results,
        dispatched=len(futures),
        completed=counter.completed,
        cancelled=cancelled,
    )
