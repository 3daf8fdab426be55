from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, List

from cookies.events.bus import EVENT_TICK, EventBus

Callback = Callable[[], None]


class ImmediateClock:
    """Runs scheduled continuations at once, ignoring the delay.

    Continuations scheduled while another one runs are queued and drained in FIFO
    order, so a long cascade does not grow the call stack.
    """

    def __init__(self):
        self._queue: Deque[Callback] = deque()
        self._draining = False

    def schedule(self, delay: float, callback: Callback) -> None:
        self._queue.append(callback)
        if self._draining:
            return
        self._draining = True
        try:
            while self._queue:
                self._queue.popleft()()
        finally:
            self._draining = False

    def cancel_all(self) -> None:
        self._queue.clear()

    @property
    def pending(self) -> int:
        return len(self._queue)


@dataclass(slots=True)
class _Scheduled:
    remaining: float
    callback: Callback


class TickClock:
    """Fires continuations once enough simulated time has passed on EVENT_TICK."""

    def __init__(self, event_bus: EventBus):
        self.event_bus = event_bus
        self._scheduled: List[_Scheduled] = []
        event_bus.subscribe(EVENT_TICK, self.on_tick)

    def schedule(self, delay: float, callback: Callback) -> None:
        self._scheduled.append(_Scheduled(remaining=max(0.0, float(delay)), callback=callback))

    def cancel_all(self) -> None:
        self._scheduled.clear()

    @property
    def pending(self) -> int:
        return len(self._scheduled)

    def on_tick(self, sender, **kwargs):
        dt = kwargs.get('dt', 1/60)
        if not self._scheduled:
            return
        due: List[_Scheduled] = []
        waiting: List[_Scheduled] = []
        for item in self._scheduled:
            item.remaining -= dt
            if item.remaining <= 0:
                due.append(item)
            else:
                waiting.append(item)
        # Callbacks may schedule more work; those wait for a later tick.
        self._scheduled = waiting
        for item in due:
            item.callback()
