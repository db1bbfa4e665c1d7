import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Timer:
    """Game clock counting whole ticks while running.

    Ticks are driven by a scheduler (see ``scheduler.py``). Every scheduled
    tick carries the generation it was queued under; ``stop`` bumps the
    generation so a tick already in flight becomes a no-op.

    Pass the owning game's lock as ``lock`` so a tick firing on a worker
    thread cannot interleave with a restart or a completion.
    """

    def __init__(
        self,
        scheduler,
        tick_ms: int = 1000,
        on_tick: Optional[Callable[[int], None]] = None,
        lock=None,
    ):
        self.scheduler = scheduler
        self.tick_ms = tick_ms
        self.on_tick = on_tick
        self.elapsed_ms = 0
        self.running = False
        self._generation = 0
        self._lock = lock or threading.RLock()

    def start(self) -> None:
        with self._lock:
            if self.running:
                return
            self.running = True
            self._generation += 1
            self.scheduler.call_later(self.tick_ms, self._tick, self._generation)

    def stop(self) -> None:
        with self._lock:
            if not self.running:
                return
            self.running = False
            self._generation += 1

    def reset(self) -> None:
        with self._lock:
            self.elapsed_ms = 0

    def _tick(self, generation: int) -> None:
        with self._lock:
            if not self.running or generation != self._generation:
                logger.debug(f"[tick-stale] generation={generation} current={self._generation}")
                return
            self.elapsed_ms += self.tick_ms
            elapsed = self.elapsed_ms
            self.scheduler.call_later(self.tick_ms, self._tick, generation)
        if self.on_tick:
            self.on_tick(elapsed)
