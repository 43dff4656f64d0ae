"""Game loop — fixed-cadence production ticks and autosave.

Nothing here owns a thread.  The host calls ``GameLoop.pump()`` as often as it
likes (the TUI from a textual interval timer, the web server once per
request) and every interval that has elapsed on the injected clock fires
exactly once.  Production per tick is ``cps * tick_interval_s``, so the
long-run accrual only depends on elapsed time, never on the tick rate.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from biscoito.data.balance import BALANCE
from biscoito.engine.store import GameStore


class RecurringTask:
    """A callback due every ``interval_s`` seconds of ``clock`` time."""

    def __init__(
        self,
        interval_s: float,
        callback: Callable[[], object],
        clock: Callable[[], float] = time.monotonic,
        max_backlog_s: float | None = None,
    ) -> None:
        if interval_s <= 0:
            raise ValueError(f"interval must be positive, got {interval_s}")
        self.interval_s = interval_s
        self._callback = callback
        self._clock = clock
        self._max_backlog_s = max_backlog_s
        self._started_at: float | None = None
        self._fired = 0

    @property
    def running(self) -> bool:
        return self._started_at is not None

    def start(self) -> None:
        self._started_at = self._clock()
        self._fired = 0

    def stop(self) -> None:
        self._started_at = None

    def pump(self) -> int:
        """Fire once for every interval elapsed since the last firing."""
        if self._started_at is None:
            return 0

        due = int((self._clock() - self._started_at) / self.interval_s)
        pending = due - self._fired
        if self._max_backlog_s is not None:
            allowed = max(1, int(self._max_backlog_s / self.interval_s))
            if pending > allowed:
                # Drop the intervals beyond the backlog cap
                self._fired = due - allowed
                pending = allowed

        fired = 0
        while fired < pending and self._started_at is not None:
            self._fired += 1
            fired += 1
            self._callback()
        return fired


class GameLoop:
    """Drives production ticks and autosave for one GameStore."""

    def __init__(
        self,
        store: GameStore,
        clock: Callable[[], float] = time.monotonic,
        tick_interval_s: float = BALANCE.loop.tick_interval_s,
        autosave_interval_s: float = BALANCE.loop.autosave_interval_s,
        max_catch_up_s: float | None = None,
    ) -> None:
        self.store = store
        self.tick_interval_s = tick_interval_s
        self._tick = RecurringTask(tick_interval_s, self._on_tick, clock, max_backlog_s=max_catch_up_s)
        # One save covers any number of missed autosave intervals
        self._autosave = RecurringTask(autosave_interval_s, self._on_autosave, clock, max_backlog_s=0.0)

    @property
    def running(self) -> bool:
        return self._tick.running

    def start(self) -> None:
        if not self.store.loaded:
            raise RuntimeError("GameLoop started before the game state was loaded")
        self._tick.start()
        self._autosave.start()

    def stop(self) -> None:
        self._tick.stop()
        self._autosave.stop()

    def pump(self) -> int:
        """Run every tick and autosave that is due. Returns ticks fired."""
        ticks = self._tick.pump()
        self._autosave.pump()
        return ticks

    def _on_tick(self) -> None:
        self.store.apply_production(self.tick_interval_s)

    def _on_autosave(self) -> None:
        # Goes through the store so the latest state is written
        self.store.save()
