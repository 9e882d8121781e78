"""
Deferred actions for delayed game transitions.

The matching game never sleeps or starts timers. Transitions that happen
"a moment later" (a wrong pair flipping back, the completion signal) are
recorded here with a due time, and the host runs them:

    actions = DeferredActions()            # wall clock (time.monotonic)
    actions.run_due()                      # call on every UI tick / rerun

    clock = VirtualClock()                 # tests
    actions = DeferredActions(clock=clock)
    clock.advance(0.3)
    actions.run_due()
"""

from __future__ import annotations

import itertools
import time
from dataclasses import dataclass, field
from typing import Callable, Optional


@dataclass(order=True)
class ScheduledAction:
    due: float
    seq: int
    name: str = field(compare=False, default="")
    action: Callable[[], None] = field(compare=False, default=lambda: None)
    cancelled: bool = field(compare=False, default=False)
    done: bool = field(compare=False, default=False)


class VirtualClock:
    """Manually advanced clock."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


class DeferredActions:
    """
    Queue of actions waiting for their due time.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._queue: list[ScheduledAction] = []
        self._seq = itertools.count()

    def schedule(self, delay: float, action: Callable[[], None], name: str = "") -> ScheduledAction:
        handle = ScheduledAction(
            due=self.clock() + max(0.0, delay),
            seq=next(self._seq),
            name=name,
            action=action,
        )
        self._queue.append(handle)
        return handle

    def cancel(self, handle: Optional[ScheduledAction]) -> None:
        if handle is None or handle.done:
            return
        handle.cancelled = True
        if handle in self._queue:
            self._queue.remove(handle)

    def cancel_all(self) -> None:
        for handle in self._queue:
            handle.cancelled = True
        self._queue.clear()

    @property
    def pending(self) -> list[ScheduledAction]:
        return sorted(self._queue)

    @property
    def next_due(self) -> Optional[float]:
        return min(h.due for h in self._queue) if self._queue else None

    def run_due(self, now: Optional[float] = None) -> int:
        """
        Run every action whose due time has passed, in due order.

        Actions scheduled by a running action run in the same pass when
        they are already due.

        Returns:
            Number of actions run
        """
        ran = 0
        while True:
            current = self.clock() if now is None else now
            due = [h for h in self._queue if h.due <= current]
            if not due:
                return ran
            handle = min(due)
            self._run(handle)
            ran += 1

    def run_all(self) -> int:
        """
        Run every pending action regardless of its due time.
        """
        ran = 0
        while self._queue:
            self._run(min(self._queue))
            ran += 1
        return ran

    def _run(self, handle: ScheduledAction) -> None:
        self._queue.remove(handle)
        handle.done = True
        handle.action()
