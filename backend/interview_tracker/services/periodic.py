from __future__ import annotations

import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)


class PeriodicJob:
    """
    Cancellable background job: runs `func` once on start, then every `interval_seconds`
    until `stop()` is called. Owners are expected to tie start/stop to their own lifetime
    (e.g. the FastAPI lifespan).
    """

    def __init__(self, name: str, func: Callable[[], object], *, interval_seconds: float) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.name = name
        self.interval_seconds = interval_seconds
        self._func = func
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(self) -> None:
        with self._lock:
            if self.running:
                return
            self._stop_event = threading.Event()
            self._thread = threading.Thread(target=self._loop, name=self.name, daemon=True)
            self._thread.start()
        logger.info("Started periodic job %s (every %ss)", self.name, self.interval_seconds)

    def stop(self, timeout: float | None = 5.0) -> None:
        with self._lock:
            thread = self._thread
            self._stop_event.set()
            self._thread = None
        if thread is not None:
            thread.join(timeout)
            logger.info("Stopped periodic job %s", self.name)

    def run_once(self) -> bool:
        """Run the job body; errors are logged and swallowed so the next tick retries."""
        try:
            self._func()
            return True
        except Exception:  # noqa: BLE001
            logger.exception("Periodic job %s failed", self.name)
            return False

    def _loop(self) -> None:
        stop_event = self._stop_event
        while not stop_event.is_set():
            self.run_once()
            if stop_event.wait(self.interval_seconds):
                break
