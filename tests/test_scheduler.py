import threading

from emoji_tapper.services.games import BackgroundScheduler, ManualScheduler


def test_call_later_fires_once():
    scheduler = ManualScheduler()
    fired = []
    timer = scheduler.call_later(1.0, lambda: fired.append(scheduler.now))
    scheduler.advance(0.5)
    assert fired == []
    scheduler.advance(0.5)
    assert fired == [1.0]
    scheduler.advance(5.0)
    assert fired == [1.0]
    assert not timer.active
    assert scheduler.pending() == 0


def test_call_every_repeats_until_cancelled():
    scheduler = ManualScheduler()
    fired = []
    timer = scheduler.call_every(0.1, lambda: fired.append(1))
    scheduler.advance(1.0)
    assert len(fired) == 10
    timer.cancel()
    timer.cancel()
    scheduler.advance(1.0)
    assert len(fired) == 10
    assert scheduler.pending() == 0


def test_callbacks_can_schedule_more_work():
    scheduler = ManualScheduler()
    order = []

    def first():
        order.append('first')
        scheduler.call_later(0.5, lambda: order.append('second'))

    scheduler.call_later(1.0, first)
    scheduler.advance(2.0)
    assert order == ['first', 'second']


class FakeSocketIO:
    """Runs background tasks inline; sleeping cancels after a few loops."""

    def __init__(self, loops):
        self.loops = loops
        self.sleeps = []
        self.timer = None

    def start_background_task(self, target, *args):
        self.timer = args[0]
        target(*args)

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        if len(self.sleeps) > self.loops:
            self.timer.cancel()


def test_background_scheduler_repeats_and_stops():
    sio = FakeSocketIO(loops=3)
    fired = []
    timer = BackgroundScheduler(sio, lock=threading.Lock()).call_every(0.2, lambda: fired.append(1))
    assert len(fired) == 3
    assert sio.sleeps == [0.2] * 4
    assert not timer.active


def test_background_scheduler_one_shot():
    sio = FakeSocketIO(loops=10)
    fired = []
    BackgroundScheduler(sio).call_later(1.0, lambda: fired.append(1))
    assert fired == [1]
    assert sio.sleeps == [1.0]
