"""Conversational front-end for the scheduler.

Maps a chat line to one of a handful of intents (list, delete, schedule,
help) and returns the reply text. Intents are checked in that order on the
lower-cased line; scheduling is extracted from the original text so names
keep their case.
"""

import logging
import re
from datetime import datetime, timedelta

from ai_scheduler.config import settings
from ai_scheduler.sentry import add_breadcrumb
from ai_scheduler.services.extractor import ScheduleExtractor
from ai_scheduler.services.formatting import format_when
from ai_scheduler.services.store import Task, TaskStore

logger = logging.getLogger(__name__)

LIST_PATTERN = re.compile(r"list|show|what.*(today|tomorrow|next)")
LIST_RANGE_PATTERN = re.compile(r"(today|tomorrow)")
DELETE_PATTERN = re.compile(r"(delete|remove) ")
SCHEDULE_PATTERN = re.compile(r"schedule|add|create")
HELP_PATTERN = re.compile(r"help|how|examples?")

HELP_TEXT = (
    "Examples:\n"
    "• schedule standup tomorrow at 9am for 15m\n"
    "• schedule call next monday 3pm with John\n"
    "• list tomorrow\n"
    "• delete standup"
)
DEFAULT_REPLY = (
    'I can schedule tasks. Try: "schedule review on 25 Aug 3:30pm for 30m with Sara"'
)
GREETING = 'Hi! I can schedule things. Try: "schedule meeting tomorrow at 3pm with John for 30m"'
NO_ITEMS_REPLY = "No items found for that range."
NO_TIME_REPLY = "Sorry, could not understand the time."


def format_task_line(task: Task) -> str:
    return f"• {task.title} — {format_when(task.start)}"


class ChatHandler:
    """Answers chat lines against a task store."""

    def __init__(
        self,
        store: TaskStore,
        extractor: ScheduleExtractor | None = None,
        list_limit: int | None = None,
    ):
        self.store = store
        self.extractor = extractor or ScheduleExtractor()
        self.list_limit = list_limit or settings.chat_list_limit

    def handle(self, text: str, now: datetime) -> str:
        lower = text.lower()

        if LIST_PATTERN.search(lower):
            return self._track("list", self._list(lower, now))

        if DELETE_PATTERN.search(lower):
            return self._track("delete", self._delete(lower))

        if SCHEDULE_PATTERN.search(lower):
            return self._track("schedule", self._schedule(text, now))

        if HELP_PATTERN.search(lower):
            return self._track("help", HELP_TEXT)

        return self._track("fallback", DEFAULT_REPLY)

    def _track(self, intent: str, reply: str) -> str:
        add_breadcrumb(message=f"chat intent: {intent}", category="chat")
        logger.debug(f"Handled {intent} intent")
        return reply

    def _list(self, lower: str, now: datetime) -> str:
        match = LIST_RANGE_PATTERN.search(lower)
        when = match.group(1) if match else None

        if when == "tomorrow":
            items = self.store.on_day((now + timedelta(days=1)).date(), tzinfo=now.tzinfo)
        else:
            items = self.store.starting_from(now)

        if not items:
            return NO_ITEMS_REPLY
        return "\n".join(format_task_line(task) for task in items[: self.list_limit])

    def _delete(self, lower: str) -> str:
        key = DELETE_PATTERN.sub("", lower, count=1).strip()
        match = self.store.find_by_title(key)
        if match is None:
            return f'Could not find an item matching "{key}"'

        self.store.delete(match.id)
        return f"Deleted: {match.title}"

    def _schedule(self, text: str, now: datetime) -> str:
        result = self.extractor.extract(text, now)
        if result.schedule is None:
            return result.failure.message if result.failure else NO_TIME_REPLY

        task = self.store.add(result.schedule)
        return f"Scheduled: {task.title} on {format_when(task.start)}"
