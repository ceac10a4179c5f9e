"""Daily reminder scheduling."""

from src.reminders.scheduler import (
    DailyReminder,
    ReminderNotification,
    ScheduledTimer,
    next_fire_time,
)

__all__ = [
    "DailyReminder",
    "ReminderNotification",
    "ScheduledTimer",
    "next_fire_time",
]
