from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from tempclip.database.clip_store import ClipStore

logger = logging.getLogger(__name__)


class LazyEviction:
    """Debounce gate deciding when an access should sweep the store inline."""

    def __init__(
        self,
        interval: float = 120.0,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self.interval = interval
        self._monotonic = monotonic
        self._lock = threading.Lock()
        self._last_run = monotonic()

    def due(self) -> bool:
        """Return True at most once per ``interval``; claims the slot when it does."""
        now = self._monotonic()
        with self._lock:
            if now - self._last_run < self.interval:
                return False
            self._last_run = now
            return True


class EvictionService:

    def __init__(
        self,
        store: "ClipStore",
        interval: float = 300.0,
        auto_start: bool = False,
    ) -> None:
        self.store = store
        self.interval = interval
        self.runs = 0
        self._lock = threading.RLock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._is_running = False

        if auto_start:
            self.start()

    @property
    def is_running(self) -> bool:
        return self._is_running

    def start(self) -> None:
        with self._lock:
            if self._is_running:
                return

            self._stop_event.clear()
            self._is_running = True
            self._thread = threading.Thread(
                target=self._run_loop, daemon=True, name="tempclip-eviction")
            self._thread.start()
        logger.info("Eviction service started (every %.0fs)", self.interval)

    def stop(self) -> None:
        with self._lock:
            if not self._is_running:
                return

            self._is_running = False
            self._stop_event.set()

        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None
        logger.info("Eviction service stopped")

    def run_once(self) -> int:
        removed = self.store.cleanup()
        self.runs += 1
        return removed

    def _run_loop(self) -> None:
        while not self._stop_event.wait(self.interval):
            try:
                self.run_once()
            except Exception:
                logger.exception("Scheduled cleanup failed")

    def __enter__(self) -> "EvictionService":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
