"""Reminder scheduling for stored tasks.

A reminder fires ``remind`` minutes before a task starts. Pending reminders
are asyncio timer handles keyed by task id, so rescheduling or deleting a
task cancels exactly its own reminder.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from ai_scheduler.services.formatting import format_when
from ai_scheduler.services.store import Task

logger = logging.getLogger(__name__)


@dataclass
class Reminder:
    """Notification payload for a due task."""

    task_id: str
    title: str
    body: str


def build_reminder(task: Task) -> Reminder:
    return Reminder(
        task_id=task.id,
        title=f"Reminder: {task.title}",
        body=f"{format_when(task.start)} — {task.who}",
    )


def reminder_lead(task: Task) -> timedelta | None:
    """How long before start the reminder fires, or None if disabled."""
    if task.remind == "none":
        return None
    try:
        minutes = int(task.remind)
    except ValueError:
        return None
    return timedelta(minutes=minutes)


class ReminderScheduler:
    """Schedules one reminder callback per task on an asyncio loop."""

    def __init__(
        self,
        notify: Callable[[Reminder], None],
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        self._notify = notify
        self._loop = loop
        self._handles: dict[str, asyncio.TimerHandle] = {}

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def schedule(self, task: Task, now: datetime) -> asyncio.TimerHandle | None:
        """Schedule the reminder for ``task``; None if there is nothing to schedule.

        Disabled reminders, unparseable lead times and reminders whose moment
        has already passed are skipped.
        """
        lead = reminder_lead(task)
        if lead is None:
            return None

        delay = (task.start - lead - now).total_seconds()
        if delay <= 0:
            logger.debug(f"Reminder for task {task.id} is already due, skipping")
            return None

        self.cancel(task.id)
        handle = self._get_loop().call_later(delay, self._fire, task)
        self._handles[task.id] = handle
        logger.info(f"Reminder for task {task.id} scheduled in {delay:.0f}s")
        return handle

    def _fire(self, task: Task) -> None:
        self._handles.pop(task.id, None)
        self._notify(build_reminder(task))

    def cancel(self, task_id: str) -> bool:
        handle = self._handles.pop(task_id, None)
        if handle is None:
            return False
        handle.cancel()
        logger.debug(f"Cancelled reminder for task {task_id}")
        return True

    def cancel_all(self) -> None:
        for task_id in list(self._handles):
            self.cancel(task_id)

    def pending(self) -> list[str]:
        """Task ids with a reminder still waiting to fire."""
        return list(self._handles)

    def schedule_all(self, tasks: list[Task], now: datetime) -> int:
        return sum(1 for task in tasks if self.schedule(task, now) is not None)

    def handle_store_event(self, event: str, task: Task, now: datetime) -> None:
        """Keep reminders in step with store mutations (see TaskStore.on_change).

        Completed tasks keep no pending reminder.
        """
        if event in ("updated", "deleted"):
            self.cancel(task.id)
        if event in ("added", "updated") and not task.done:
            self.schedule(task, now)
