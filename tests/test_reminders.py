"""Tests for reminder scheduling."""

import asyncio
from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest

from ai_scheduler.services.reminders import (
    Reminder,
    ReminderScheduler,
    build_reminder,
    reminder_lead,
)
from ai_scheduler.services.store import Task

START = datetime(2026, 10, 20, 9, 0)


def make_task(task_id: str = "t1", remind: str = "15", **kwargs) -> Task:
    return Task(id=task_id, title="standup", start=START, remind=remind, **kwargs)


class TestReminderLead:
    def test_minutes(self):
        assert reminder_lead(make_task(remind="15")) == timedelta(minutes=15)

    def test_disabled(self):
        assert reminder_lead(make_task(remind="none")) is None

    def test_not_a_number(self):
        assert reminder_lead(make_task(remind="soon")) is None


class TestBuildReminder:
    def test_payload(self):
        reminder = build_reminder(make_task(who="John"))

        assert reminder == Reminder(
            task_id="t1",
            title="Reminder: standup",
            body="Oct 20, 2026, 9:00 AM — John",
        )


class TestReminderScheduler:
    @pytest.mark.asyncio
    async def test_schedule_returns_handle(self):
        scheduler = ReminderScheduler(MagicMock())
        now = datetime(2026, 10, 19, 10, 30)

        handle = scheduler.schedule(make_task(), now)

        assert handle is not None
        assert scheduler.pending() == ["t1"]
        scheduler.cancel_all()

    @pytest.mark.asyncio
    async def test_disabled_reminder_not_scheduled(self):
        scheduler = ReminderScheduler(MagicMock())

        assert scheduler.schedule(make_task(remind="none"), datetime(2026, 10, 19)) is None
        assert scheduler.pending() == []

    @pytest.mark.asyncio
    async def test_reminder_in_the_past_not_scheduled(self):
        scheduler = ReminderScheduler(MagicMock())
        # 08:50 is after 08:45, the reminder moment
        now = datetime(2026, 10, 20, 8, 50)

        assert scheduler.schedule(make_task(), now) is None

    @pytest.mark.asyncio
    async def test_reminder_fires(self):
        notify = MagicMock()
        scheduler = ReminderScheduler(notify)
        now = START - timedelta(minutes=15, milliseconds=20)

        scheduler.schedule(make_task(who="Ana"), now)
        await asyncio.sleep(0.1)

        notify.assert_called_once()
        reminder = notify.call_args[0][0]
        assert reminder.title == "Reminder: standup"
        assert reminder.task_id == "t1"
        assert scheduler.pending() == []

    @pytest.mark.asyncio
    async def test_cancel(self):
        notify = MagicMock()
        scheduler = ReminderScheduler(notify)
        now = START - timedelta(minutes=15, milliseconds=20)

        scheduler.schedule(make_task(), now)
        assert scheduler.cancel("t1") is True
        await asyncio.sleep(0.1)

        notify.assert_not_called()
        assert scheduler.cancel("t1") is False

    @pytest.mark.asyncio
    async def test_rescheduling_replaces_handle(self):
        scheduler = ReminderScheduler(MagicMock())
        now = datetime(2026, 10, 19, 10, 30)

        first = scheduler.schedule(make_task(), now)
        second = scheduler.schedule(make_task(), now)

        assert first.cancelled()
        assert not second.cancelled()
        assert scheduler.pending() == ["t1"]
        scheduler.cancel_all()

    @pytest.mark.asyncio
    async def test_schedule_all_counts_scheduled(self):
        scheduler = ReminderScheduler(MagicMock())
        now = datetime(2026, 10, 19, 10, 30)
        tasks = [make_task("a"), make_task("b", remind="none"), make_task("c")]

        assert scheduler.schedule_all(tasks, now) == 2
        scheduler.cancel_all()
        assert scheduler.pending() == []


class TestStoreEvents:
    @pytest.mark.asyncio
    async def test_added_schedules(self):
        scheduler = ReminderScheduler(MagicMock())
        now = datetime(2026, 10, 19, 10, 30)

        scheduler.handle_store_event("added", make_task(), now)

        assert scheduler.pending() == ["t1"]
        scheduler.cancel_all()

    @pytest.mark.asyncio
    async def test_deleted_cancels(self):
        scheduler = ReminderScheduler(MagicMock())
        now = datetime(2026, 10, 19, 10, 30)
        scheduler.schedule(make_task(), now)

        scheduler.handle_store_event("deleted", make_task(), now)

        assert scheduler.pending() == []

    @pytest.mark.asyncio
    async def test_done_update_cancels(self):
        scheduler = ReminderScheduler(MagicMock())
        now = datetime(2026, 10, 19, 10, 30)
        scheduler.schedule(make_task(), now)

        scheduler.handle_store_event("updated", make_task(done=True), now)

        assert scheduler.pending() == []

    @pytest.mark.asyncio
    async def test_update_reschedules(self):
        scheduler = ReminderScheduler(MagicMock())
        now = datetime(2026, 10, 19, 10, 30)
        first = scheduler.schedule(make_task(), now)

        scheduler.handle_store_event("updated", make_task(remind="30"), now)

        assert first.cancelled()
        assert scheduler.pending() == ["t1"]
        scheduler.cancel_all()
