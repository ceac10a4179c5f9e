"""
Daily Reminder

Fires one notification per day at a fixed local hour, for as long as
the reminder is active.

Each firing schedules exactly one timer, computed fresh from the clock
by next_fire_time(). cancel() stops the pending timer and guarantees no
further notification, even if the timer thread is already waking up.

The reminder never reads or writes transactions.
"""

import threading
from datetime import datetime, timedelta
from typing import Callable, Optional, Protocol

from pydantic import BaseModel

from src.audit import AuditLogger


class ScheduledTimer(Protocol):
    """The part of threading.Timer the reminder uses."""

    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], ScheduledTimer]


class ReminderNotification(BaseModel):
    """What the notifier is asked to show."""

    title: str
    body: str
    fired_at: datetime


def next_fire_time(now: datetime, hour: int) -> datetime:
    """
    Next occurrence of hour:00:00 at or after now.

    >>> next_fire_time(datetime(2024, 5, 1, 8, 30), 19)
    datetime.datetime(2024, 5, 1, 19, 0)
    >>> next_fire_time(datetime(2024, 5, 1, 20, 0), 19)
    datetime.datetime(2024, 5, 2, 19, 0)
    """
    candidate = now.replace(hour=hour, minute=0, second=0, microsecond=0)
    if now > candidate:
        candidate += timedelta(days=1)
    return candidate


def _daemon_timer(delay: float, callback: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    return timer


class DailyReminder:
    """
    Cancellable daily notification.

    Usage:
        reminder = DailyReminder(notify=show_notification, hour=19)
        reminder.start()
        ...
        reminder.cancel()
    """

    def __init__(
        self,
        notify: Callable[[ReminderNotification], None],
        hour: int = 19,
        title: str = "Expense Manager",
        body: str = "Don't forget to log your expenses for today! 📝",
        clock: Callable[[], datetime] = datetime.now,
        timer_factory: TimerFactory = _daemon_timer,
        audit_logger: Optional[AuditLogger] = None,
    ):
        if not 0 <= hour <= 23:
            raise ValueError(f"hour must be between 0 and 23, got {hour}")

        self._notify = notify
        self._hour = hour
        self._title = title
        self._body = body
        self._clock = clock
        self._timer_factory = timer_factory
        self._audit_logger = audit_logger or AuditLogger()

        self._lock = threading.Lock()
        self._active = False
        self._timer: Optional[ScheduledTimer] = None
        self._next_fire_at: Optional[datetime] = None
        self._generation = 0

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def next_fire_at(self) -> Optional[datetime]:
        return self._next_fire_at

    def start(self) -> None:
        """Schedule the next reminder. Starting an active reminder is a no-op."""
        with self._lock:
            if self._active:
                return
            self._active = True
            self._generation += 1
            self._schedule_locked(after=None)

    def cancel(self) -> None:
        """Stop the reminder. Safe to call repeatedly."""
        with self._lock:
            self._active = False
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._next_fire_at = None

    def _schedule_locked(self, after: Optional[datetime]) -> None:
        now = self._clock()
        fire_at = next_fire_time(now, self._hour)
        # A timer may wake a little early; never fire the same slot twice
        if after is not None and fire_at <= after:
            fire_at = next_fire_time(after + timedelta(seconds=1), self._hour)

        delay = max((fire_at - now).total_seconds(), 0.0)
        generation = self._generation
        timer = self._timer_factory(delay, lambda: self._fire(generation))
        self._timer = timer
        self._next_fire_at = fire_at
        timer.start()

        self._audit_logger.log_reminder_scheduled(fire_at)

    def _is_current(self, generation: int) -> bool:
        return self._active and generation == self._generation

    def _fire(self, generation: int) -> None:
        with self._lock:
            if not self._is_current(generation):
                return
            fired_slot = self._next_fire_at

        notification = ReminderNotification(
            title=self._title,
            body=self._body,
            fired_at=self._clock(),
        )
        try:
            self._notify(notification)
            self._audit_logger.log_reminder_fired(self._title)
        except Exception as e:
            # Best-effort delivery; the schedule continues
            self._audit_logger.log_error(
                error_type="reminder_delivery_failed",
                error_message=str(e),
            )

        with self._lock:
            if self._is_current(generation):
                self._schedule_locked(after=fired_slot)
