"""
Dispatch Module
Delivery of watcher notifications to a single designated context, and the
periodic timer that drives polling watchers
"""

import logging
import threading
from queue import Queue, Empty
from typing import Callable, Optional


class InlineDispatcher:
    """Runs posted callables immediately on the posting thread"""

    def post(self, fn: Callable[[], None]) -> None:
        fn()


class UIDispatcher:
    """Serializes posted callables onto one consumer context

    Callables are queued by ``post`` and run in FIFO order either by whoever
    calls ``run_pending`` (the consumer's own loop) or by a delivery thread
    started with ``start``.
    """

    def __init__(self, name: str = "ui"):
        self.name = name
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._queue: "Queue[Optional[Callable[[], None]]]" = Queue()
        self._thread: Optional[threading.Thread] = None
        self.running = False

    def post(self, fn: Callable[[], None]) -> None:
        self._queue.put(fn)

    def run_pending(self) -> int:
        """Run every callable queued so far on the calling thread

        Returns:
            Number of callables executed
        """
        count = 0
        while True:
            try:
                fn = self._queue.get_nowait()
            except Empty:
                break
            if fn is None:
                continue
            self._run(fn)
            count += 1
        return count

    def start(self) -> None:
        """Start a delivery thread that runs callables as they arrive"""
        if self.running:
            return
        self.running = True
        self._thread = threading.Thread(
            target=self._delivery_loop,
            daemon=True,
            name=f"Dispatcher-{self.name}"
        )
        self._thread.start()

    def stop(self) -> None:
        if not self.running:
            return
        self.running = False
        self._queue.put(None)
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout=5.0)
            if self._thread.is_alive():
                self.logger.warning("Delivery thread did not stop cleanly")
        self._thread = None

    def _delivery_loop(self) -> None:
        while self.running:
            fn = self._queue.get()
            if fn is None:
                continue
            self._run(fn)

    def _run(self, fn: Callable[[], None]) -> None:
        try:
            fn()
        except Exception as e:
            self.logger.error(f"Error in {self.name} callback: {e}")


class PollTimer:
    """Repeating timer that calls ``fn`` every ``interval`` seconds on its own thread

    The first call happens one interval after ``start``. ``cancel`` is
    idempotent and may be called from any thread, including from ``fn`` itself.
    """

    def __init__(self, interval: float, fn: Callable[[], None], name: str = "PollTimer"):
        self.interval = interval
        self.fn = fn
        self.name = name
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._cancelled = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._loop, daemon=True, name=self.name)
        self._thread.start()

    def cancel(self) -> None:
        self._cancelled.set()
        thread = self._thread
        if thread and thread is not threading.current_thread():
            thread.join(timeout=5.0)
            if thread.is_alive():
                self.logger.warning(f"{self.name} did not stop cleanly")

    @property
    def is_active(self) -> bool:
        return self._thread is not None and not self._cancelled.is_set()

    def _loop(self) -> None:
        while not self._cancelled.wait(self.interval):
            try:
                self.fn()
            except Exception as e:
                self.logger.error(f"Error in {self.name} tick: {e}")
