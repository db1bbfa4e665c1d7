from app.services.games.scheduler import ManualScheduler
from app.services.games.timer import Timer


def test_counts_whole_ticks_while_running():
    sched = ManualScheduler()
    timer = Timer(sched, tick_ms=1000)
    timer.start()
    sched.advance(999)
    assert timer.elapsed_ms == 0
    sched.advance(1)
    assert timer.elapsed_ms == 1000
    sched.advance(2500)
    assert timer.elapsed_ms == 3000


def test_start_is_idempotent():
    sched = ManualScheduler()
    timer = Timer(sched)
    timer.start()
    timer.start()
    sched.advance(1000)
    assert timer.elapsed_ms == 1000


def test_stop_keeps_elapsed_and_resumes():
    sched = ManualScheduler()
    timer = Timer(sched)
    timer.start()
    sched.advance(2000)
    timer.stop()
    timer.stop()
    sched.advance(5000)
    assert timer.elapsed_ms == 2000
    assert not timer.running
    timer.start()
    sched.advance(1000)
    assert timer.elapsed_ms == 3000


def test_stale_tick_after_stop_start_is_ignored():
    sched = ManualScheduler()
    timer = Timer(sched)
    timer.start()
    sched.advance(500)
    timer.stop()
    timer.start()
    # the tick queued by the first start would land at 1000
    sched.advance(500)
    assert timer.elapsed_ms == 0
    sched.advance(500)
    assert timer.elapsed_ms == 1000


def test_reset_running_and_stopped():
    sched = ManualScheduler()
    timer = Timer(sched)
    timer.reset()
    assert timer.elapsed_ms == 0
    timer.start()
    sched.advance(3000)
    timer.reset()
    assert timer.elapsed_ms == 0
    assert timer.running
    sched.advance(1000)
    assert timer.elapsed_ms == 1000


def test_on_tick_receives_elapsed():
    sched = ManualScheduler()
    seen = []
    timer = Timer(sched, tick_ms=250, on_tick=seen.append)
    timer.start()
    sched.advance(1000)
    assert seen == [250, 500, 750, 1000]
