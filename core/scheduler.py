"""
Cycle Scheduler
Background thread firing a callback at a fixed interval until cancelled
"""

import threading
from typing import Callable, Optional


class CycleScheduler:
    """
    Periodic driver for trading cycles

    Ticks run on a single daemon thread, so they never overlap. cancel() sets
    the stop event; no tick starts after it returns, while a tick already in
    progress runs to completion.
    """

    def __init__(self, interval: float, callback: Callable[[], None], logger, name: str = "cycle-scheduler"):
        if interval <= 0:
            raise ValueError("Scheduler interval must be positive")

        self.interval = interval
        self.callback = callback
        self.logger = logger
        self.name = name
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    def start(self):
        with self._lock:
            if self.is_running:
                return
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop_event,),
                name=self.name,
                daemon=True
            )
            self._thread.start()
        self.logger.debug(f"Scheduler started ({self.interval:.1f}s interval)")

    def _run(self, stop_event: threading.Event):
        while not stop_event.wait(self.interval):
            try:
                self.callback()
            except Exception as e:
                self.logger.error(f"Scheduled cycle failed: {e}", exc_info=True)

    def cancel(self, wait: bool = False, timeout: Optional[float] = None):
        """Stop scheduling further ticks"""
        with self._lock:
            self._stop_event.set()
            thread = self._thread
            self._thread = None

        if wait and thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self.logger.debug("Scheduler cancelled")
