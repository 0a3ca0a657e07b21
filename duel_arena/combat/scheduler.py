"""
Scheduler for the deferred events of a match.

The engine never waits on wall-clock timers. Cooldown resets, the end of an
action's resolution and the AI's turn are entries on a virtual clock that the
host loop advances, either with real elapsed time or, in tests, by hand.

Core Concepts:
- Time is a float number of seconds, starting at 0
- Entries fire in chronological order, ties in scheduling order
- Cancelled entries stay in the queue and are skipped when popped
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from typing import Callable

from catchery import log_warning


@dataclass
class ScheduledEvent:
    """A callback waiting on the clock."""

    execution_time: float
    sequence_id: int
    name: str = ""
    callback: Callable[[], None] = field(default=lambda: None, compare=False)
    cancelled: bool = False
    fired: bool = False

    def __lt__(self, other: "ScheduledEvent") -> bool:
        if self.execution_time != other.execution_time:
            return self.execution_time < other.execution_time
        return self.sequence_id < other.sequence_id

    @property
    def is_pending(self) -> bool:
        return not self.cancelled and not self.fired


class Scheduler:
    """Min-heap of deferred callbacks driven by an explicit clock."""

    def __init__(self) -> None:
        self._queue: list[ScheduledEvent] = []
        self._now: float = 0.0
        self._sequence_counter: int = 0

    @property
    def now(self) -> float:
        """Current engine time in seconds."""
        return self._now

    @property
    def pending(self) -> int:
        """Number of entries that will still fire."""
        return sum(1 for entry in self._queue if entry.is_pending)

    def schedule(
        self,
        delay: float,
        callback: Callable[[], None],
        name: str = "",
    ) -> ScheduledEvent:
        """
        Schedules a callback to fire after a delay.

        Args:
            delay (float): Seconds from now, must not be negative.
            callback (Callable[[], None]): The function to run.
            name (str): A label used for logging and debugging.

        Returns:
            ScheduledEvent: A handle that can be cancelled.

        """
        if delay < 0:
            log_warning(
                "Cannot schedule an event in the past",
                {"delay": delay, "name": name, "context": "scheduler"},
            )
            raise ValueError(f"Invalid delay for '{name}': {delay}")
        entry = ScheduledEvent(
            execution_time=self._now + delay,
            sequence_id=self._sequence_counter,
            name=name,
            callback=callback,
        )
        self._sequence_counter += 1
        heapq.heappush(self._queue, entry)
        return entry

    def cancel(self, entry: ScheduledEvent) -> bool:
        """
        Cancels a pending entry.

        Returns:
            bool: True if the entry was pending and is now cancelled.

        """
        if not entry.is_pending:
            return False
        entry.cancelled = True
        return True

    def cancel_all(self) -> int:
        """Cancels every pending entry and returns how many were cancelled."""
        cancelled = 0
        for entry in self._queue:
            if self.cancel(entry):
                cancelled += 1
        return cancelled

    def time_until_next(self) -> float | None:
        """Seconds until the next pending entry fires, None if there is none."""
        self._drop_inactive()
        if not self._queue:
            return None
        return max(0.0, self._queue[0].execution_time - self._now)

    def advance(self, seconds: float) -> int:
        """
        Moves the clock forward, firing every entry that comes due.

        Entries scheduled by a callback while advancing also fire if they fall
        within the advanced window.

        Args:
            seconds (float): How far to move the clock, must not be negative.

        Returns:
            int: The number of entries fired.

        """
        if seconds < 0:
            log_warning(
                "Cannot move the clock backwards",
                {"seconds": seconds, "now": self._now, "context": "scheduler"},
            )
            raise ValueError(f"Invalid advance: {seconds}")
        target = self._now + seconds
        fired = 0
        while True:
            self._drop_inactive()
            if not self._queue or self._queue[0].execution_time > target:
                break
            entry = heapq.heappop(self._queue)
            self._now = entry.execution_time
            entry.fired = True
            entry.callback()
            fired += 1
        self._now = target
        return fired

    def run_until_idle(self, limit: int = 1000) -> int:
        """
        Fires entries one after the other until the queue is empty.

        Args:
            limit (int): Maximum number of entries to fire, guards against
                callbacks that reschedule forever.

        Returns:
            int: The number of entries fired.

        """
        fired = 0
        while fired < limit:
            wait = self.time_until_next()
            if wait is None:
                break
            fired += self.advance(wait)
        return fired

    def _drop_inactive(self) -> None:
        while self._queue and not self._queue[0].is_pending:
            heapq.heappop(self._queue)
