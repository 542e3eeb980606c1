"""Tests for feedgen.scheduling.heartbeat module."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

import pytest

from feedgen.scheduling.heartbeat import (
    DAILY,
    EVERY_5_MINUTES,
    HOURLY,
    RECURRENCES,
    Heartbeat,
    InMemoryCronScheduler,
)

NOW = 1_000.0


@dataclass
class RecordingQueue:
    added: list[str] = field(default_factory=lambda: [])

    def add(self, hook: str) -> None:
        self.added.append(hook)


def _heartbeat() -> tuple[Heartbeat, RecordingQueue, InMemoryCronScheduler]:
    queue = RecordingQueue()
    scheduler = InMemoryCronScheduler()
    return Heartbeat(queue, scheduler, clock=lambda: NOW), queue, scheduler


class TestHeartbeatActions:
    def test_hourly_action_enqueues_hourly_hook(self) -> None:
        heartbeat, queue, _ = _heartbeat()
        heartbeat.schedule_hourly_action()
        assert queue.added == [HOURLY]

    def test_daily_action_enqueues_daily_hook(self) -> None:
        heartbeat, queue, _ = _heartbeat()
        heartbeat.schedule_daily_action()
        assert queue.added == [DAILY]

    def test_five_minute_action_enqueues_five_minute_hook(self) -> None:
        heartbeat, queue, _ = _heartbeat()
        heartbeat.schedule_every_5_minute_action()
        assert queue.added == [EVERY_5_MINUTES]

    def test_hook_names_are_distinct(self) -> None:
        assert len({HOURLY, DAILY, EVERY_5_MINUTES}) == 3


class TestScheduleCronEvents:
    def test_init_schedules_all_three_hooks(self) -> None:
        heartbeat, _, scheduler = _heartbeat()

        heartbeat.init()

        for hook, _recurrence in heartbeat.cron_events():
            assert scheduler.next_scheduled(hook) == NOW

    def test_existing_events_are_not_rescheduled(self) -> None:
        heartbeat, _, scheduler = _heartbeat()
        scheduler.schedule_event(500.0, "hourly", heartbeat.hourly_cron_name)

        heartbeat.schedule_cron_events()

        assert scheduler.next_scheduled(heartbeat.hourly_cron_name) == 500.0
        assert scheduler.next_scheduled(heartbeat.daily_cron_name) == NOW

    def test_init_registers_five_minute_recurrence(self) -> None:
        heartbeat, _, _ = _heartbeat()
        scheduler = InMemoryCronScheduler(schedules={"hourly": 3600, "daily": 86400})
        heartbeat.scheduler = scheduler

        heartbeat.init()

        assert scheduler.schedules["five_minutes"] == 300

    def test_works_with_any_scheduler(self) -> None:
        calls: list[tuple[str, str]] = []

        class FakeScheduler:
            def add_schedules(self, schedules: Mapping[str, int]) -> None:
                calls.append(("schedules", ",".join(sorted(schedules))))

            def add_action(self, hook: str, callback: Callable[[], None]) -> None:
                calls.append(("action", hook))

            def next_scheduled(self, hook: str) -> float | None:
                return None

            def schedule_event(self, timestamp: float, recurrence: str, hook: str) -> None:
                calls.append(("event", f"{hook}@{recurrence}"))

        heartbeat = Heartbeat(RecordingQueue(), FakeScheduler(), clock=lambda: NOW)
        heartbeat.init()

        assert ("schedules", "five_minutes") in calls
        assert ("event", f"{heartbeat.every_5_minute_cron_name}@five_minutes") in calls
        assert ("event", f"{heartbeat.hourly_cron_name}@hourly") in calls
        assert ("event", f"{heartbeat.daily_cron_name}@daily") in calls


class TestInMemoryCronScheduler:
    def test_default_recurrences(self) -> None:
        assert RECURRENCES == {"five_minutes": 300, "hourly": 3600, "daily": 86400}

    def test_unknown_recurrence_raises(self) -> None:
        scheduler = InMemoryCronScheduler()
        with pytest.raises(ValueError, match="unknown recurrence"):
            scheduler.schedule_event(NOW, "weekly", "hook")

    def test_run_due_fires_and_enqueues(self) -> None:
        heartbeat, queue, scheduler = _heartbeat()
        heartbeat.init()

        fired = scheduler.run_due(NOW)

        assert len(fired) == 3
        assert sorted(queue.added) == sorted([HOURLY, DAILY, EVERY_5_MINUTES])

    def test_run_due_advances_by_interval(self) -> None:
        heartbeat, queue, scheduler = _heartbeat()
        heartbeat.init()
        scheduler.run_due(NOW)
        queue.added.clear()

        assert scheduler.run_due(NOW + 299) == []
        assert scheduler.run_due(NOW + 300) == [heartbeat.every_5_minute_cron_name]
        assert queue.added == [EVERY_5_MINUTES]

    def test_missed_runs_fire_once(self) -> None:
        heartbeat, queue, scheduler = _heartbeat()
        heartbeat.init()
        scheduler.run_due(NOW)
        queue.added.clear()

        scheduler.run_due(NOW + 3600)

        assert queue.added.count(EVERY_5_MINUTES) == 1
        assert queue.added.count(HOURLY) == 1
        assert DAILY not in queue.added
        assert scheduler.next_scheduled(heartbeat.every_5_minute_cron_name) == NOW + 3600 + 300

    def test_hook_without_actions_still_advances(self) -> None:
        scheduler = InMemoryCronScheduler()
        scheduler.schedule_event(NOW, "hourly", "orphan")

        assert scheduler.run_due(NOW) == ["orphan"]
        assert scheduler.next_scheduled("orphan") == NOW + 3600
