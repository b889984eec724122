"""Timer scheduling for game engines.

Engines never sleep or spawn threads themselves; they ask an injected
scheduler for one-shot (``call_later``) or repeating (``call_every``)
callbacks and keep the returned :class:`Timer` so they can cancel it.

- ``ManualScheduler`` runs on a virtual clock advanced by the caller
  (tests, and the socket surface while TESTING)
- ``BackgroundScheduler`` runs each timer as a Flask-SocketIO background
  task, serialised with the owning session through a shared lock
"""

import heapq
import itertools
import logging
from typing import Callable, List, Optional, Tuple


logger = logging.getLogger(__name__)


class Timer:
    def __init__(self, callback: Callable[[], None], interval: float, repeat: bool):
        self.callback = callback
        self.interval = interval
        self.repeat = repeat
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        self._active = False

    def _finish(self) -> None:
        if not self.repeat:
            self._active = False


class ManualScheduler:
    """Deterministic scheduler driven by :meth:`advance`."""

    def __init__(self):
        self.now = 0.0
        self._queue: List[Tuple[float, int, Timer]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> Timer:
        return self._push(Timer(callback, delay, repeat=False), delay)

    def call_every(self, interval: float, callback: Callable[[], None]) -> Timer:
        if interval <= 0:
            raise ValueError('interval must be positive')
        return self._push(Timer(callback, interval, repeat=True), interval)

    def _push(self, timer: Timer, delay: float) -> Timer:
        heapq.heappush(self._queue, (self.now + max(0.0, delay), next(self._seq), timer))
        return timer

    def pending(self) -> int:
        """Number of live timers still waiting to fire."""
        return sum(1 for _, _, timer in self._queue if timer.active)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        # Small epsilon so 10 x 0.1 reaches 1.0 despite float drift
        while self._queue and self._queue[0][0] <= target + 1e-9:
            due, _, timer = heapq.heappop(self._queue)
            if not timer.active:
                continue
            self.now = max(self.now, due)
            timer._finish()
            timer.callback()
            if timer.repeat and timer.active:
                heapq.heappush(self._queue, (due + timer.interval, next(self._seq), timer))
        self.now = max(self.now, target)


class BackgroundScheduler:
    """Scheduler backed by ``socketio.start_background_task``.

    Every timer is its own sleep loop. A cancelled timer is checked both
    before and after taking the lock so it never fires once cancelled.
    """

    def __init__(self, socketio, lock=None):
        self.socketio = socketio
        self.lock = lock

    def call_later(self, delay: float, callback: Callable[[], None]) -> Timer:
        return self._start(Timer(callback, delay, repeat=False))

    def call_every(self, interval: float, callback: Callable[[], None]) -> Timer:
        if interval <= 0:
            raise ValueError('interval must be positive')
        return self._start(Timer(callback, interval, repeat=True))

    def _start(self, timer: Timer) -> Timer:
        self.socketio.start_background_task(self._worker, timer)
        return timer

    def _worker(self, timer: Timer) -> None:
        while timer.active:
            self.socketio.sleep(timer.interval)
            if not timer.active:
                break
            self._fire(timer)
            if not timer.repeat:
                break
        logger.debug(f"[timer-exit] interval={timer.interval} repeat={timer.repeat}")

    def _fire(self, timer: Timer) -> None:
        if self.lock is None:
            timer._finish()
            timer.callback()
            return
        with self.lock:
            if not timer.active:
                return
            timer._finish()
            timer.callback()


def cancel_timer(timer: Optional[Timer]) -> None:
    if timer is not None:
        timer.cancel()
