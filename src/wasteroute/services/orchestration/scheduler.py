"""Background thread that runs the automatic routing cycle on a fixed interval."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Callable, Optional

from ...config import settings
from ...schemas.routing import CycleSummary

logger = logging.getLogger(__name__)


class CycleScheduler:
    """Calls ``cycle`` every ``interval_seconds`` until stopped.

    A failing cycle, or one returning a summary with ``error`` set, counts as
    failed and the next tick runs as usual. With ``timeout_seconds`` set, a
    cycle that overruns is abandoned and logged; its worker thread is left to
    finish on its own and the next tick gets a fresh one.
    """

    def __init__(
        self,
        cycle: Callable[[], CycleSummary],
        *,
        interval_seconds: float | None = None,
        timeout_seconds: float | None = None,
        run_immediately: bool = True,
    ) -> None:
        self.cycle = cycle
        self.interval_seconds = (
            interval_seconds if interval_seconds is not None else settings.schedule_interval_minutes * 60
        )
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else settings.cycle_timeout_seconds
        self.run_immediately = run_immediately
        self.last_summary: Optional[CycleSummary] = None
        self.completed_cycles = 0
        self.failed_cycles = 0
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            raise RuntimeError("Scheduler is already running.")
        self._stop.clear()
        self._open_executor()
        self._thread = threading.Thread(target=self._loop, name="routing-scheduler", daemon=True)
        self._thread.start()
        logger.info(f"Routing scheduler started (every {self.interval_seconds:.0f}s)")

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        self._close_executor()
        logger.info("Routing scheduler stopped")

    def run_forever(self) -> None:
        """Run ticks in the calling thread until ``stop`` is called from elsewhere."""
        self._stop.clear()
        self._open_executor()
        try:
            self._loop()
        finally:
            self._close_executor()

    def tick(self) -> Optional[CycleSummary]:
        """Run one cycle, isolating any failure. Returns ``None`` when it failed."""
        self._open_executor()
        try:
            if self._executor is not None:
                summary = self._executor.submit(self.cycle).result(timeout=self.timeout_seconds)
            else:
                summary = self.cycle()
        except FutureTimeoutError:
            self.failed_cycles += 1
            logger.error(f"Routing cycle exceeded {self.timeout_seconds}s and was abandoned")
            # the overrunning cycle still occupies the worker
            self._close_executor()
            return None
        except Exception:
            self.failed_cycles += 1
            logger.exception("Routing cycle failed")
            return None

        if summary.error:
            self.failed_cycles += 1
            self.last_summary = summary
            return None

        self.completed_cycles += 1
        self.last_summary = summary
        logger.info(
            f"Routing cycle finished: {summary.routes_created} route(s), "
            f"{summary.requests_processed} request(s)"
        )
        return summary

    def _open_executor(self) -> None:
        if self.timeout_seconds and self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="routing-cycle")

    def _close_executor(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None

    def _loop(self) -> None:
        if not self.run_immediately and self._stop.wait(self.interval_seconds):
            return
        while not self._stop.is_set():
            self.tick()
            if self._stop.wait(self.interval_seconds):
                break
