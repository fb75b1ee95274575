"""Cooperative timer scheduling on a virtual millisecond clock.

Every periodic or one-shot timer of a session is a :class:`ScheduledTask`
registered under a ``(TaskKey, discriminator)`` id. Callbacks run one at a
time, to completion, in due-time order (insertion order breaks ties), and
the clock only moves inside :meth:`TaskScheduler.advance`.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, TypeAlias

logger = logging.getLogger(__name__)


class TaskKey(Enum):
    """Purpose of a scheduled task."""

    PLAYER_TICK = "player_tick"
    PURSUER_TICK = "pursuer_tick"
    SPECIAL_SPAWN = "special_spawn"
    SPECIAL_DESPAWN = "special_despawn"
    SPECIAL_MOVE = "special_move"
    OBJECTIVE_MOVE = "objective_move"
    FROZEN_EXPIRY = "frozen_expiry"
    PURSUER_RESPAWN = "pursuer_respawn"
    CELEBRATION = "celebration"
    INTENT_RELEASE = "intent_release"


TaskId: TypeAlias = tuple[TaskKey, int]


@dataclass(order=True)
class ScheduledTask:
    due_ms: float
    seq: int
    task_id: TaskId = field(compare=False)
    callback: Callable[[], None] = field(compare=False)
    period_ms: float | None = field(default=None, compare=False)


class TaskScheduler:
    """Keyed set of cancelable timers sharing one monotonic clock."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self.now_ms = start_ms
        self._tasks: dict[TaskId, ScheduledTask] = {}
        self._queue: list[ScheduledTask] = []
        self._seq = itertools.count()

    def schedule(
        self,
        key: TaskKey,
        delay_ms: float,
        callback: Callable[[], None],
        *,
        period_ms: float | None = None,
        discriminator: int = 0,
    ) -> TaskId:
        """Register a task, replacing any live task with the same id.

        With *period_ms* the task repeats every *period_ms* after its first
        firing at ``now + delay_ms``.
        """
        if delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")
        if period_ms is not None and period_ms <= 0:
            raise ValueError("period_ms must be > 0")
        task_id: TaskId = (key, discriminator)
        task = ScheduledTask(
            due_ms=self.now_ms + delay_ms,
            seq=next(self._seq),
            task_id=task_id,
            callback=callback,
            period_ms=period_ms,
        )
        self._tasks[task_id] = task
        heapq.heappush(self._queue, task)
        return task_id

    def every(
        self, key: TaskKey, period_ms: float, callback: Callable[[], None], discriminator: int = 0
    ) -> TaskId:
        """Repeating task whose first firing is one period from now."""
        return self.schedule(
            key, period_ms, callback, period_ms=period_ms, discriminator=discriminator
        )

    def cancel(self, key: TaskKey, discriminator: int = 0) -> bool:
        return self._tasks.pop((key, discriminator), None) is not None

    def cancel_keys(self, *keys: TaskKey) -> int:
        """Cancel every task whose purpose is in *keys*; return the count."""
        doomed = [task_id for task_id in self._tasks if task_id[0] in keys]
        for task_id in doomed:
            del self._tasks[task_id]
        return len(doomed)

    def cancel_all(self) -> None:
        self._tasks.clear()
        self._queue.clear()

    def is_scheduled(self, key: TaskKey, discriminator: int = 0) -> bool:
        return (key, discriminator) in self._tasks

    def scheduled_ids(self) -> list[TaskId]:
        return list(self._tasks)

    def due_in(self, key: TaskKey, discriminator: int = 0) -> float | None:
        task = self._tasks.get((key, discriminator))
        return None if task is None else task.due_ms - self.now_ms

    def advance(self, elapsed_ms: float) -> int:
        """Move the clock forward, running every task that falls due.

        Returns the number of callbacks executed. Heap entries whose id was
        cancelled or replaced are discarded when they surface.
        """
        if elapsed_ms < 0:
            raise ValueError("elapsed_ms must be >= 0")
        target = self.now_ms + elapsed_ms
        fired = 0
        while self._queue and self._queue[0].due_ms <= target:
            task = heapq.heappop(self._queue)
            if self._tasks.get(task.task_id) is not task:
                continue
            self.now_ms = max(self.now_ms, task.due_ms)
            if task.period_ms is None:
                del self._tasks[task.task_id]
            else:
                task.due_ms += task.period_ms
                task.seq = next(self._seq)
                heapq.heappush(self._queue, task)
            task.callback()
            fired += 1
        self.now_ms = target
        return fired


class Advanceable(Protocol):
    def advance(self, elapsed_ms: float) -> object: ...


class RealtimeDriver:
    """Feeds wall-clock-independent elapsed time into a simulation.

    Reads ``time.monotonic`` (or an injected clock) so suspend/resume of the
    host or wall-clock adjustments never produce negative or jumped deltas.
    """

    def __init__(
        self,
        target: Advanceable,
        clock: Callable[[], float] = time.monotonic,
        max_step_ms: float = 250.0,
    ) -> None:
        self.target = target
        self.clock = clock
        self.max_step_ms = max_step_ms
        self._last: float | None = None

    def pump(self) -> float:
        """Advance *target* by the time elapsed since the previous pump."""
        now = self.clock()
        if self._last is None:
            self._last = now
            return 0.0
        elapsed_ms = max(0.0, (now - self._last) * 1000.0)
        self._last = now
        if elapsed_ms > self.max_step_ms:
            logger.debug("Clamping %.1f ms frame to %.1f ms", elapsed_ms, self.max_step_ms)
            elapsed_ms = self.max_step_ms
        self.target.advance(elapsed_ms)
        return elapsed_ms
