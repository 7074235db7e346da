"""
tests/test_concurrency.py

run_bounded: in-flight limit, ordering, progress and cancellation.
"""

from __future__ import annotations

import threading
import time

import pytest

from logo_importer.concurrency import ProgressCounter, run_bounded


class InFlightTracker:
    def __init__(self) -> None:
        self.current = 0
        self.peak = 0
        self._lock = threading.Lock()

    def __call__(self, item: int) -> int:
        with self._lock:
            self.current += 1
            self.peak = max(self.peak, self.current)
        time.sleep(0.01)
        with self._lock:
            self.current -= 1
        return item * 2


# ---------------------------------------------------------------------------
# Limits and ordering
# ---------------------------------------------------------------------------


class TestBoundedRun:
    @pytest.mark.parametrize("limit", [1, 3, 8])
    def test_never_exceeds_limit(self, limit: int) -> None:
        tracker = InFlightTracker()
        run = run_bounded(list(range(24)), tracker, limit=limit)

        assert tracker.peak <= limit
        assert run.results == [item * 2 for item in range(24)]

    def test_results_follow_input_order(self) -> None:
        delays = [0.03, 0.0, 0.02, 0.0, 0.01]

        def slow_first(index: int) -> str:
            time.sleep(delays[index])
            return f"item-{index}"

        run = run_bounded(list(range(len(delays))), slow_first, limit=5)
        assert run.results == [f"item-{index}" for index in range(len(delays))]

    def test_empty_batch(self) -> None:
        run = run_bounded([], lambda item: item)
        assert run.results == []
        assert run.completed == 0
        assert not run.cancelled

    def test_worker_errors_propagate(self) -> None:
        def explode(item: int) -> int:
            if item == 2:
                raise ValueError("bad item")
            return item

        with pytest.raises(ValueError):
            run_bounded([1, 2, 3], explode, limit=2)


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------


class TestProgress:
    def test_reports_every_completion(self) -> None:
        seen: list[tuple[int, int]] = []
        run_bounded(list(range(6)), lambda item: item, limit=3, on_progress=lambda c, t: seen.append((c, t)))

        assert sorted(seen) == [(count, 6) for count in range(1, 7)]

    def test_counter_is_monotonic_under_threads(self) -> None:
        seen: list[int] = []
        counter = ProgressCounter(total=200, on_progress=lambda completed, _total: seen.append(completed))
        threads = [threading.Thread(target=lambda: [counter.increment() for _ in range(50)]) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert counter.completed == 200
        assert seen == list(range(1, 201))


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------


class TestCancellation:
    def test_cancel_before_start_dispatches_nothing(self) -> None:
        cancel = threading.Event()
        cancel.set()
        run = run_bounded([1, 2, 3], lambda item: item, cancel_event=cancel)

        assert run.cancelled
        assert run.dispatched == 0
        assert run.results == [None, None, None]

    def test_cancel_stops_further_dispatch(self) -> None:
        cancel = threading.Event()

        def worker(item: int) -> int:
            if item == 1:
                cancel.set()
            return item

        run = run_bounded(list(range(10)), worker, limit=1, cancel_event=cancel)

        assert run.cancelled
        assert run.dispatched < 10
        assert run.completed == run.dispatched
        assert run.results[0] == 0
        assert all(result is None for result in run.results[run.dispatched:])
