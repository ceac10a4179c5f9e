"""Tests for the daily reminder, driven by a fake clock and fake timers."""

from datetime import datetime, timedelta

import pytest

from src.models.audit import AuditEventType
from src.reminders import DailyReminder, next_fire_time


class FakeTimer:

    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True


class FakeClock:

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 5, 1, 8, 30))


@pytest.fixture
def timers():
    return []


@pytest.fixture
def notifications():
    return []


@pytest.fixture
def reminder(clock, timers, notifications, audit_logger):
    def factory(delay, callback):
        timer = FakeTimer(delay, callback)
        timers.append(timer)
        return timer

    return DailyReminder(
        notify=notifications.append,
        hour=19,
        clock=clock,
        timer_factory=factory,
        audit_logger=audit_logger,
    )


class TestNextFireTime:

    def test_later_today(self):
        assert next_fire_time(datetime(2024, 5, 1, 8, 30), 19) == datetime(2024, 5, 1, 19)

    def test_already_passed_rolls_to_tomorrow(self):
        assert next_fire_time(datetime(2024, 5, 1, 19, 0, 1), 19) == datetime(2024, 5, 2, 19)

    def test_exactly_on_the_hour_is_now(self):
        assert next_fire_time(datetime(2024, 5, 1, 19), 19) == datetime(2024, 5, 1, 19)

    def test_month_boundary(self):
        assert next_fire_time(datetime(2024, 5, 31, 23), 19) == datetime(2024, 6, 1, 19)


class TestDailyReminder:

    def test_invalid_hour(self):
        with pytest.raises(ValueError):
            DailyReminder(notify=lambda n: None, hour=24)

    def test_start_schedules_one_timer(self, reminder, timers):
        reminder.start()

        assert len(timers) == 1
        assert timers[0].started
        assert timers[0].delay == pytest.approx(10.5 * 3600)
        assert reminder.is_active
        assert reminder.next_fire_at == datetime(2024, 5, 1, 19)

    def test_double_start_is_noop(self, reminder, timers):
        reminder.start()
        reminder.start()
        assert len(timers) == 1

    def test_fire_notifies_and_reschedules_for_tomorrow(
        self, reminder, clock, timers, notifications, recording_logger
    ):
        reminder.start()
        clock.now = datetime(2024, 5, 1, 19)
        timers[0].callback()

        assert len(notifications) == 1
        assert notifications[0].title == "Expense Manager"
        assert notifications[0].body == "Don't forget to log your expenses for today! 📝"
        assert len(timers) == 2
        assert timers[1].delay == pytest.approx(24 * 3600)
        assert reminder.next_fire_at == datetime(2024, 5, 2, 19)
        assert AuditEventType.REMINDER_FIRED.value in recording_logger.event_types()

    def test_early_wakeup_does_not_repeat_slot(self, reminder, clock, timers, notifications):
        reminder.start()
        clock.now = datetime(2024, 5, 1, 19) - timedelta(milliseconds=500)
        timers[0].callback()

        assert len(notifications) == 1
        assert reminder.next_fire_at == datetime(2024, 5, 2, 19)

    def test_cancel_stops_timer_and_stale_callback(self, reminder, timers, notifications):
        reminder.start()
        reminder.cancel()

        assert timers[0].cancelled
        assert not reminder.is_active
        assert reminder.next_fire_at is None

        timers[0].callback()
        assert notifications == []
        assert len(timers) == 1

    def test_restart_ignores_callback_from_before_cancel(
        self, reminder, timers, notifications
    ):
        reminder.start()
        reminder.cancel()
        reminder.start()

        timers[0].callback()
        assert notifications == []

        timers[1].callback()
        assert len(notifications) == 1

    def test_cancel_is_idempotent(self, reminder):
        reminder.cancel()
        reminder.start()
        reminder.cancel()
        reminder.cancel()
        assert not reminder.is_active

    def test_failing_notifier_keeps_schedule(self, clock, timers, recording_logger, audit_logger):
        def broken(notification):
            raise RuntimeError("no display")

        def factory(delay, callback):
            timer = FakeTimer(delay, callback)
            timers.append(timer)
            return timer

        reminder = DailyReminder(
            notify=broken,
            clock=clock,
            timer_factory=factory,
            audit_logger=audit_logger,
        )
        reminder.start()
        timers[0].callback()

        assert len(timers) == 2
        assert reminder.is_active
        assert AuditEventType.SYSTEM_ERROR.value in recording_logger.event_types()
