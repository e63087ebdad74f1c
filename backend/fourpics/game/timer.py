from __future__ import annotations

import logging
import threading
from typing import Any, Callable


logger = logging.getLogger(__name__)


class RoundTimer:
    """Per-round countdown driven by a background task.

    ``start_background_task`` and ``sleep`` are the Socket.IO server's, so
    the task cooperates with whichever async mode the server runs. Every
    tick takes ``lock`` so ticks and expiry are serialized with client
    events. Each run carries a generation number and exits as
    soon as it no longer matches, which is how ``stop`` cancels it.
    """

    def __init__(
        self,
        lock: threading.RLock,
        on_tick: Callable[[int], None],
        on_expire: Callable[[], None],
        start_background_task: Callable[..., Any],
        sleep: Callable[[float], Any],
        interval: float = 1.0,
    ) -> None:
        self._lock = lock
        self._on_tick = on_tick
        self._on_expire = on_expire
        self._start_background_task = start_background_task
        self._sleep = sleep
        self._interval = interval
        self._generation = 0
        self._running = False
        self.remaining = 0

    @property
    def running(self) -> bool:
        return self._running

    def start(self, duration_sec: int) -> None:
        with self._lock:
            self.stop()
            if duration_sec <= 0:
                return
            self.remaining = duration_sec
            self._running = True
            generation = self._generation

        self._start_background_task(self._run, generation)

    def stop(self) -> None:
        with self._lock:
            self._generation += 1
            self._running = False
            self.remaining = 0

    def _run(self, generation: int) -> None:
        while True:
            self._sleep(self._interval)
            if not self._step(generation):
                return

    def _step(self, generation: int) -> bool:
        with self._lock:
            if generation != self._generation:
                return False

            self.remaining -= 1
            self._on_tick(self.remaining)

            if self.remaining > 0:
                return True

            self.stop()
            logger.info("Round timer expired")
            self._on_expire()
            return False
