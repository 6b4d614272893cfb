"""Single-threaded cooperative scheduler for the game's periodic tasks.

Each task runs its body, then waits ``interval_ms`` before becoming due
again, so a slow body (e.g. a pose estimate that takes 50 ms) delays its
own next run instead of piling up missed runs. Tasks never run in parallel;
they only interleave between bodies, which is what lets the pose sampler and
the physics tick share one game-state record without a lock.

The clock is injected so tests can drive time by hand.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional


logger = logging.getLogger(__name__)

Clock = Callable[[], int]


@dataclass
class PeriodicTask:
    """One repeating task and the time (ms) it next becomes due."""

    name: str
    interval_ms: int
    callback: Callable[[], object]
    next_due_ms: int = 0
    runs: int = 0


class CooperativeScheduler:
    """Runs due tasks in registration order whenever :meth:`run_pending` is called."""

    def __init__(self, clock: Clock) -> None:
        self.clock = clock
        self.tasks: List[PeriodicTask] = []

    def add(self, name: str, interval_ms: int, callback: Callable[[], object]) -> PeriodicTask:
        """Register a task that is due immediately and then every ``interval_ms``."""

        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        task = PeriodicTask(name=name, interval_ms=interval_ms, callback=callback, next_due_ms=self.clock())
        self.tasks.append(task)
        logger.debug("Scheduled %s every %d ms", name, interval_ms)
        return task

    def run_pending(self) -> int:
        """Run every task that is due now and return how many ran."""

        ran = 0
        for task in self.tasks:
            if self.clock() < task.next_due_ms:
                continue
            task.callback()
            task.runs += 1
            # The delay starts once the body has finished, like a repeat-after-delay loop.
            task.next_due_ms = self.clock() + task.interval_ms
            ran += 1
        return ran

    def time_until_next(self) -> Optional[int]:
        """Milliseconds until the earliest task is due, ``0`` if one is overdue."""

        if not self.tasks:
            return None
        now = self.clock()
        return max(0, min(task.next_due_ms for task in self.tasks) - now)
