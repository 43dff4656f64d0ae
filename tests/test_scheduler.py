"""Tests for the recurring tasks and the game loop."""

import json

import pytest

from biscoito.data.balance import BALANCE
from biscoito.engine.save import MemoryStore, PersistenceAdapter
from biscoito.engine.scheduler import GameLoop, RecurringTask
from biscoito.engine.store import GameStore

KEY = BALANCE.persistence.save_key


class FakeClock:
    """Monotonic clock the test moves by hand."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, dt: float) -> None:
        self.now += dt


def _producing_store(kv: MemoryStore | None = None) -> GameStore:
    """Loaded store making 4 cookies per second."""
    store = GameStore(PersistenceAdapter(kv if kv is not None else MemoryStore()))
    store.load()
    store.state.building("cursor").count = 10
    store.state.building("grandma").count = 3
    return store


# ── RecurringTask ────────────────────────────────────────────────


def test_task_fires_once_per_elapsed_interval():
    clock = FakeClock()
    calls = []
    task = RecurringTask(1.0, lambda: calls.append(clock()), clock)
    task.start()
    clock.advance(3.5)
    assert task.pump() == 3
    assert task.pump() == 0
    clock.advance(0.5)
    assert task.pump() == 1
    assert len(calls) == 4


def test_task_does_not_fire_before_start():
    clock = FakeClock()
    calls = []
    task = RecurringTask(1.0, lambda: calls.append(1), clock)
    clock.advance(10)
    assert task.pump() == 0
    assert not task.running
    assert calls == []


def test_stopped_task_never_fires():
    clock = FakeClock()
    calls = []
    task = RecurringTask(1.0, lambda: calls.append(1), clock)
    task.start()
    task.stop()
    clock.advance(5)
    assert task.pump() == 0
    assert calls == []


def test_stop_inside_callback_halts_catch_up():
    clock = FakeClock()
    calls = []

    def callback() -> None:
        calls.append(1)
        task.stop()

    task = RecurringTask(1.0, callback, clock)
    task.start()
    clock.advance(5.5)
    assert task.pump() == 1
    assert calls == [1]


def test_backlog_cap_drops_old_intervals():
    clock = FakeClock()
    calls = []
    task = RecurringTask(1.0, lambda: calls.append(1), clock, max_backlog_s=5.0)
    task.start()
    clock.advance(100.5)
    assert task.pump() == 5
    clock.advance(1.0)
    assert task.pump() == 1


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        RecurringTask(0, lambda: None)


# ── GameLoop ─────────────────────────────────────────────────────


def test_loop_refuses_to_start_before_load():
    store = GameStore(PersistenceAdapter(MemoryStore()))
    loop = GameLoop(store, clock=FakeClock())
    with pytest.raises(RuntimeError):
        loop.start()
    assert not loop.running


def test_loop_applies_production_per_tick():
    clock = FakeClock()
    store = _producing_store()
    loop = GameLoop(store, clock=clock, tick_interval_s=0.1)
    loop.start()
    clock.advance(1.05)
    assert loop.pump() == 10
    assert store.state.cookies == pytest.approx(4.0)


def test_accrual_is_independent_of_tick_rate():
    duration = 10.025  # lands between ticks for both cadences
    results = []
    for interval in (0.1, 0.05):
        clock = FakeClock()
        store = _producing_store()
        loop = GameLoop(store, clock=clock, tick_interval_s=interval)
        loop.start()
        clock.advance(duration)
        loop.pump()
        results.append(store.state.cookies)

    assert results[0] == pytest.approx(40.0)
    assert results[1] == pytest.approx(results[0])


def test_accrual_with_irregular_pumping_tracks_elapsed_time():
    clock = FakeClock()
    store = _producing_store()
    loop = GameLoop(store, clock=clock, tick_interval_s=0.05)
    loop.start()
    for _ in range(270):
        clock.advance(0.037)
        loop.pump()
    # 9.99 s elapsed; at most one tick still pending
    assert store.state.cookies == pytest.approx(4.0 * 9.99, abs=4.0 * 0.05)


def test_stopped_loop_stops_producing():
    clock = FakeClock()
    store = _producing_store()
    loop = GameLoop(store, clock=clock)
    loop.start()
    clock.advance(1.05)
    loop.pump()
    earned = store.state.cookies
    loop.stop()
    clock.advance(100)
    assert loop.pump() == 0
    assert store.state.cookies == earned


def test_autosave_writes_latest_state():
    clock = FakeClock()
    kv = MemoryStore()
    store = _producing_store(kv)
    loop = GameLoop(store, clock=clock, tick_interval_s=0.1, autosave_interval_s=10.0)
    loop.start()

    clock.advance(5.05)
    loop.pump()
    assert KEY not in kv.data

    clock.advance(5.0)
    loop.pump()
    first = json.loads(kv.data[KEY])
    assert first["cookies"] == pytest.approx(40.0)

    for _ in range(15):
        store.earn_currency(1)
    clock.advance(10.0)
    loop.pump()
    second = json.loads(kv.data[KEY])
    assert second["cookies"] == pytest.approx(80.0 + 15)


def test_autosave_fires_once_after_long_gap():
    clock = FakeClock()
    saves = []
    store = _producing_store()
    loop = GameLoop(store, clock=clock, autosave_interval_s=10.0)
    store.save = lambda: saves.append(1) or True
    loop.start()
    clock.advance(95.0)
    loop.pump()
    assert saves == [1]
