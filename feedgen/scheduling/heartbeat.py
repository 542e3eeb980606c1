"""Heartbeat hooks.

Three recurring cron hooks fire on a five-minute, hourly and daily cadence.
Their callbacks do no work themselves: each one enqueues the matching
heartbeat action on the task queue. Consumers of the queue run the real jobs
(e.g. regenerating feeds).

Cron entries are only scheduled when none is pending. Checking the cron
table is cheaper than querying the task queue on every request.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Protocol

__all__ = [
    "EVERY_5_MINUTES",
    "HOURLY",
    "DAILY",
    "RECURRENCES",
    "CronScheduler",
    "TaskQueue",
    "Heartbeat",
    "InMemoryCronScheduler",
]

EVERY_5_MINUTES = "feedgen_5_minute_heartbeat"
HOURLY = "feedgen_hourly_heartbeat"
DAILY = "feedgen_daily_heartbeat"

FIVE_MINUTES = "five_minutes"

# Recurrence name -> interval in seconds.
RECURRENCES: Mapping[str, int] = {
    FIVE_MINUTES: 300,
    "hourly": 3600,
    "daily": 86400,
}


class TaskQueue(Protocol):
    """Durable task queue owned by the host application."""

    def add(self, hook: str) -> None: ...


class CronScheduler(Protocol):
    """Host cron facility.

    Implementations must know the recurrences they are asked to use;
    ``add_schedules`` registers extra ones.
    """

    def add_schedules(self, schedules: Mapping[str, int]) -> None: ...

    def add_action(self, hook: str, callback: Callable[[], None]) -> None: ...

    def next_scheduled(self, hook: str) -> float | None: ...

    def schedule_event(self, timestamp: float, recurrence: str, hook: str) -> None: ...


class Heartbeat:
    """Schedules the heartbeat cron hooks and forwards them to the queue."""

    hourly_cron_name = f"{HOURLY}_cron"
    daily_cron_name = f"{DAILY}_cron"
    every_5_minute_cron_name = f"{EVERY_5_MINUTES}_cron"

    def __init__(
        self,
        queue: TaskQueue,
        scheduler: CronScheduler,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.queue = queue
        self.scheduler = scheduler
        self._clock = clock

    def init(self) -> None:
        """Register the recurrence and hook callbacks, then schedule."""
        self.scheduler.add_schedules({FIVE_MINUTES: RECURRENCES[FIVE_MINUTES]})
        self.scheduler.add_action(self.hourly_cron_name, self.schedule_hourly_action)
        self.scheduler.add_action(self.daily_cron_name, self.schedule_daily_action)
        self.scheduler.add_action(self.every_5_minute_cron_name, self.schedule_every_5_minute_action)
        self.schedule_cron_events()

    def cron_events(self) -> tuple[tuple[str, str], ...]:
        """(cron hook, recurrence) pairs managed by the heartbeat."""
        return (
            (self.hourly_cron_name, "hourly"),
            (self.daily_cron_name, "daily"),
            (self.every_5_minute_cron_name, FIVE_MINUTES),
        )

    def schedule_cron_events(self) -> None:
        now = self._clock()
        for hook, recurrence in self.cron_events():
            if self.scheduler.next_scheduled(hook) is None:
                self.scheduler.schedule_event(now, recurrence, hook)

    def schedule_hourly_action(self) -> None:
        self.queue.add(HOURLY)

    def schedule_daily_action(self) -> None:
        self.queue.add(DAILY)

    def schedule_every_5_minute_action(self) -> None:
        self.queue.add(EVERY_5_MINUTES)


@dataclass(slots=True)
class _CronEntry:
    next_run: float
    interval: int


def _empty_schedules() -> dict[str, int]:
    return dict(RECURRENCES)


@dataclass
class InMemoryCronScheduler:
    """In-process cron table.

    Nothing runs on its own: ``run_due(now)`` fires every hook whose next
    run is at or before ``now`` and advances it by one interval.
    """

    schedules: dict[str, int] = field(default_factory=_empty_schedules)
    _entries: dict[str, _CronEntry] = field(default_factory=lambda: {})
    _actions: dict[str, list[Callable[[], None]]] = field(default_factory=lambda: {})

    def add_schedules(self, schedules: Mapping[str, int]) -> None:
        self.schedules.update(schedules)

    def add_action(self, hook: str, callback: Callable[[], None]) -> None:
        self._actions.setdefault(hook, []).append(callback)

    def next_scheduled(self, hook: str) -> float | None:
        entry = self._entries.get(hook)
        return entry.next_run if entry else None

    def schedule_event(self, timestamp: float, recurrence: str, hook: str) -> None:
        interval = self.schedules.get(recurrence)
        if interval is None:
            raise ValueError(f"unknown recurrence: {recurrence}")
        self._entries[hook] = _CronEntry(next_run=timestamp, interval=interval)

    def run_due(self, now: float) -> list[str]:
        """Fire due hooks once each; returns the hooks that fired."""
        fired: list[str] = []
        for hook, entry in sorted(self._entries.items(), key=lambda item: item[1].next_run):
            if entry.next_run > now:
                continue
            for callback in self._actions.get(hook, []):
                callback()
            entry.next_run += entry.interval
            # Skip missed runs rather than replaying them.
            while entry.next_run <= now:
                entry.next_run += entry.interval
            fired.append(hook)
        return fired
