import time
from datetime import datetime, timedelta, timezone

from tempclip.database import ClipStore
from tempclip.services import EvictionService, LazyEviction


class _Ticker:
    def __init__(self):
        self.value = 0.0

    def __call__(self):
        return self.value


def test_lazy_eviction_debounces():
    ticker = _Ticker()
    lazy = LazyEviction(interval=120, monotonic=ticker)

    assert not lazy.due()
    ticker.value = 119.9
    assert not lazy.due()
    ticker.value = 120.0
    assert lazy.due()
    assert not lazy.due()
    ticker.value = 240.0
    assert lazy.due()


def test_run_once_counts(store, clock):
    store.create("short", clock() + timedelta(seconds=1))
    clock.advance(seconds=2)
    service = EvictionService(store, interval=60)

    assert service.run_once() == 1
    assert service.runs == 1


def test_timer_sweeps_expired_clip():
    # real clock: a clip expiring in 1s is gone shortly after
    store = ClipStore()
    store.create("short", datetime.now(timezone.utc) + timedelta(seconds=1))
    store.create("long", datetime.now(timezone.utc) + timedelta(minutes=10))

    with EvictionService(store, interval=0.25) as service:
        assert service.is_running
        deadline = time.monotonic() + 5.0
        while store.stats().total > 1 and time.monotonic() < deadline:
            time.sleep(0.05)

    assert not service.is_running
    assert store.stats().total == 1
    assert service.runs >= 1


def test_stop_is_prompt_and_idempotent(store):
    service = EvictionService(store, interval=300, auto_start=True)
    started = time.monotonic()
    service.stop()
    service.stop()

    assert time.monotonic() - started < 2.0
    assert not service.is_running


def test_failed_tick_keeps_loop_alive(caplog):
    class Flaky:
        calls = 0

        def cleanup(self):
            Flaky.calls += 1
            if Flaky.calls == 1:
                raise RuntimeError("boom")
            return 0

    service = EvictionService(Flaky(), interval=0.05)
    service.start()
    deadline = time.monotonic() + 5.0
    while Flaky.calls < 2 and time.monotonic() < deadline:
        time.sleep(0.02)
    service.stop()

    assert Flaky.calls >= 2
    assert "Scheduled cleanup failed" in caplog.text
