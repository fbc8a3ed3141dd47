"""Tests for the debounced task."""

from pharma_pitch.storage.debounce import DebouncedTask


class Counter:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1


class TestDebouncedTask:
    def test_burst_fires_once(self, scheduler):
        counter = Counter()
        task = DebouncedTask(1.0, counter, scheduler)
        for _ in range(5):
            task.schedule()
            scheduler.advance(0.2)
        assert counter.calls == 0
        scheduler.advance(1.0)
        assert counter.calls == 1
        assert not task.pending

    def test_each_schedule_restarts_window(self, scheduler):
        counter = Counter()
        task = DebouncedTask(1.0, counter, scheduler)
        task.schedule()
        scheduler.advance(0.6)
        task.schedule()
        scheduler.advance(0.6)
        assert counter.calls == 0
        scheduler.advance(0.5)
        assert counter.calls == 1

    def test_only_one_live_handle(self, scheduler):
        task = DebouncedTask(1.0, Counter(), scheduler)
        task.schedule()
        task.schedule()
        task.schedule()
        assert len(scheduler.pending) == 1

    def test_cancel(self, scheduler):
        counter = Counter()
        task = DebouncedTask(1.0, counter, scheduler)
        task.schedule()
        task.cancel()
        scheduler.advance(5)
        assert counter.calls == 0
        assert not task.pending

    def test_fire_now(self, scheduler):
        counter = Counter()
        task = DebouncedTask(1.0, counter, scheduler)
        assert task.fire_now() is False
        task.schedule()
        assert task.fire_now() is True
        assert counter.calls == 1
        scheduler.advance(5)
        assert counter.calls == 1
