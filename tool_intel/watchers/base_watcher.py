"""
Base Watcher Classes

Shared attach/detach, start/stop and edge-triggered delivery for all terminal
watchers.

Delivery model: a scan captures the watcher generation when it begins, and
every changed value is handed to the dispatcher as a single posted callable.
The callable re-checks the generation under the watcher lock before invoking
the consumer callback. ``detach``/``stop`` bump the generation under the same
lock, so once they return no callback from an earlier scan can start.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from ..dispatch import InlineDispatcher, PollTimer
from ..terminal_grid import TerminalGrid


def bottom_window_start(rows: int, window_rows: int) -> int:
    """First row index of the bottom ``window_rows`` rows of a grid"""
    return max(0, rows - window_rows)


class BaseWatcher(ABC):
    """Base class for watchers that derive state from a terminal grid"""

    def __init__(self, grid: Optional[TerminalGrid] = None, dispatcher=None):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.dispatcher = dispatcher or InlineDispatcher()
        self._grid = grid
        self._lock = threading.RLock()
        self._generation = 0

    @property
    def grid(self) -> Optional[TerminalGrid]:
        return self._grid

    @property
    def generation(self) -> int:
        return self._generation

    def attach(self, grid: TerminalGrid) -> None:
        """Point the watcher at a grid, discarding deliveries queued for the old one"""
        with self._lock:
            self._generation += 1
            self._grid = grid
            self.reset_state()

    def detach(self) -> None:
        """Stop reading the grid; no callback fires after this returns"""
        with self._lock:
            self._generation += 1
            self._grid = None

    def reset_state(self) -> None:
        """Forget derived state; called whenever a new grid is attached"""
        pass

    def _emit(self, callback: Optional[Callable[[Any], None]], value: Any,
              generation: int) -> None:
        if callback is None:
            return
        self.dispatcher.post(lambda: self._deliver(generation, callback, value))

    def _deliver(self, generation: int, callback: Callable[[Any], None], value: Any) -> None:
        with self._lock:
            if generation != self._generation:
                self.logger.debug(f"Dropping stale delivery from generation {generation}")
                return
            callback(value)


class RangeWatcher(BaseWatcher):
    """Watcher driven by "rows start..end changed" signals from the terminal

    Only signals that reach the bottom ``window_rows`` rows trigger a rescan.
    """

    DEFAULT_WINDOW_ROWS = 5

    def __init__(self, grid: Optional[TerminalGrid] = None, dispatcher=None,
                 window_rows: Optional[int] = None):
        super().__init__(grid, dispatcher)
        self.window_rows = window_rows or self.DEFAULT_WINDOW_ROWS

    def process_range(self, start_row: int, end_row: int) -> None:
        """Handle a range-changed notification from the terminal"""
        generation = self._generation
        grid = self._grid
        if grid is None:
            return

        rows = grid.rows
        if rows <= 0:
            return
        scan_start = bottom_window_start(rows, self.window_rows)
        if end_row < scan_start:
            return

        # Read each row once; the grid may be mutating underneath us
        lines = [text for text in grid.read_rows(scan_start, rows - 1) if text]
        self.evaluate(lines, generation)

    def rescan(self) -> None:
        """Re-evaluate the bottom window regardless of what changed"""
        grid = self._grid
        if grid is not None:
            self.process_range(0, grid.rows - 1)

    @abstractmethod
    def evaluate(self, lines, generation: int) -> None:
        """Recompute state from the non-empty lines of the scan window"""
        pass


class PollingWatcher(BaseWatcher):
    """Watcher driven by its own fixed-period background timer"""

    DEFAULT_POLL_INTERVAL = 0.5

    def __init__(self, grid: Optional[TerminalGrid] = None, dispatcher=None,
                 poll_interval: Optional[float] = None):
        super().__init__(grid, dispatcher)
        self.poll_interval = poll_interval or self.DEFAULT_POLL_INTERVAL
        self._timer: Optional[PollTimer] = None

    @property
    def running(self) -> bool:
        return self._timer is not None

    def start(self) -> None:
        with self._lock:
            if self._timer is not None:
                return
            self._timer = PollTimer(self.poll_interval, self.poll,
                                    name=f"{self.__class__.__name__}-poll")
            self._timer.start()
        self.logger.debug(f"Started polling every {self.poll_interval}s")

    def stop(self) -> None:
        """Cancel the timer; idempotent and safe during an in-flight poll"""
        with self._lock:
            self._generation += 1
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
            self.logger.debug("Stopped polling")

    def detach(self) -> None:
        self.stop()
        super().detach()

    def poll(self) -> None:
        """Run one scan of the grid; a missing grid makes this a no-op"""
        generation = self._generation
        grid = self._grid
        if grid is None:
            return
        self.scan(grid, generation)

    @abstractmethod
    def scan(self, grid: TerminalGrid, generation: int) -> None:
        pass
