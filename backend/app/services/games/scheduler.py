import heapq
import itertools
import logging
from typing import Any, Callable, List, Tuple

logger = logging.getLogger(__name__)


class BackgroundScheduler:
    """Run deferred callbacks as Socket.IO background tasks.

    Each ``call_later`` spawns one worker that sleeps for the delay and then
    invokes the callback. Nothing is cancelled: callers attach their own
    generation tokens and ignore callbacks that fire too late.
    """

    def __init__(self, socketio):
        self.socketio = socketio

    def call_later(self, delay_ms: int, callback: Callable[..., Any], *args: Any) -> None:
        def _worker():
            self.socketio.sleep(max(0, delay_ms) / 1000.0)
            try:
                callback(*args)
            except Exception:
                logger.exception(f"[timer-error] callback={getattr(callback, '__qualname__', callback)}")

        self.socketio.start_background_task(_worker)


class ManualScheduler:
    """Virtual-clock scheduler; callbacks run only when ``advance`` is called."""

    def __init__(self):
        self.now_ms = 0
        self._queue: List[Tuple[int, int, Callable[..., Any], tuple]] = []
        self._seq = itertools.count()

    def call_later(self, delay_ms: int, callback: Callable[..., Any], *args: Any) -> None:
        due = self.now_ms + max(0, delay_ms)
        heapq.heappush(self._queue, (due, next(self._seq), callback, args))

    def advance(self, ms: int) -> None:
        target = self.now_ms + ms
        # callbacks may schedule more work; keep draining anything due by target
        while self._queue and self._queue[0][0] <= target:
            due, _, callback, args = heapq.heappop(self._queue)
            self.now_ms = due
            callback(*args)
        self.now_ms = target

    @property
    def pending(self) -> int:
        return len(self._queue)


def make_scheduler(app, socketio):
    """Pick the scheduler for this app.

    Tests get a ``ManualScheduler`` unless ENABLE_SCHEDULER_IN_TESTS is set.
    """
    if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        return ManualScheduler()
    return BackgroundScheduler(socketio)
