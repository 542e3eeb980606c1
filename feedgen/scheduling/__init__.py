"""Recurring heartbeat hooks."""

from .heartbeat import (
    DAILY,
    EVERY_5_MINUTES,
    HOURLY,
    CronScheduler,
    Heartbeat,
    InMemoryCronScheduler,
    TaskQueue,
)

__all__ = [
    "DAILY",
    "EVERY_5_MINUTES",
    "HOURLY",
    "CronScheduler",
    "Heartbeat",
    "InMemoryCronScheduler",
    "TaskQueue",
]
