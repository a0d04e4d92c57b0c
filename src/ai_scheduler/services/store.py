"""Task store for scheduled items.

Keeps every task in memory and mirrors the full list to a JSON file on each
mutation. The store is the only place identifiers are assigned; parsed
schedules arrive without one.
"""

import json
import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, fields
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any

from ai_scheduler.config import settings
from ai_scheduler.services.schedule import ParsedSchedule

logger = logging.getLogger(__name__)

StoreListener = Callable[[str, "Task"], None]


class TaskNotFoundError(KeyError):
    """Raised when a task id is not in the store."""


@dataclass
class Task:
    """A persisted task."""

    id: str
    title: str
    start: datetime
    who: str = ""
    end: datetime | None = None
    repeat: str = "none"
    remind: str = "15"
    notes: str = ""
    done: bool = False

    @classmethod
    def from_schedule(cls, schedule: ParsedSchedule, task_id: str) -> "Task":
        return cls(
            id=task_id,
            title=schedule.title,
            start=schedule.start,
            who=schedule.who,
            end=schedule.end,
            repeat=schedule.repeat,
            remind=schedule.remind,
            notes=schedule.notes,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "who": self.who,
            "start": self.start.isoformat(),
            "end": self.end.isoformat() if self.end else None,
            "repeat": self.repeat,
            "remind": self.remind,
            "notes": self.notes,
            "done": self.done,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Task":
        return cls(
            id=d["id"],
            title=d["title"],
            start=datetime.fromisoformat(d["start"]),
            who=d.get("who") or "",
            end=datetime.fromisoformat(d["end"]) if d.get("end") else None,
            repeat=d.get("repeat", "none"),
            remind=d.get("remind", "15"),
            notes=d.get("notes") or "",
            done=d.get("done", False),
        )


_EDITABLE_FIELDS = frozenset(f.name for f in fields(Task)) - {"id"}


class TaskStore:
    """JSON-file backed collection of tasks.

    Listeners registered with ``on_change`` are called with
    ("added" | "updated" | "deleted", task) after each persisted mutation.
    """

    def __init__(self, path: Path | None = None):
        self.path = path or settings.store_path
        self._tasks: list[Task] = self._load()
        self._listeners: list[StoreListener] = []

    def _load(self) -> list[Task]:
        if not self.path.exists():
            return []

        try:
            with open(self.path) as f:
                raw = json.load(f)
            return [Task.from_dict(item) for item in raw]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Could not read task store {self.path}, starting empty: {e}")
            return []

    def _persist(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump([task.to_dict() for task in self._tasks], f, indent=2)

    def _emit(self, event: str, task: Task) -> None:
        for listener in self._listeners:
            listener(event, task)

    def on_change(self, listener: StoreListener) -> None:
        self._listeners.append(listener)

    def add(self, schedule: ParsedSchedule) -> Task:
        """Assign an id to a parsed schedule, persist it and return the task."""
        task = Task.from_schedule(schedule, task_id=uuid.uuid4().hex)
        self._tasks.append(task)
        self._persist()
        logger.info(f"Added task {task.id}: {task.title}")
        self._emit("added", task)
        return task

    def get(self, task_id: str) -> Task:
        for task in self._tasks:
            if task.id == task_id:
                return task
        raise TaskNotFoundError(task_id)

    def update(self, task_id: str, **patch: Any) -> Task:
        unknown = set(patch) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        task = self.get(task_id)
        for name, value in patch.items():
            setattr(task, name, value)
        self._persist()
        logger.info(f"Updated task {task_id}: {', '.join(sorted(patch))}")
        self._emit("updated", task)
        return task

    def delete(self, task_id: str) -> Task:
        task = self.get(task_id)
        self._tasks.remove(task)
        self._persist()
        logger.info(f"Deleted task {task_id}: {task.title}")
        self._emit("deleted", task)
        return task

    def all(self) -> list[Task]:
        """All tasks ordered by start."""
        return sorted(self._tasks, key=lambda t: t.start)

    def find_by_title(self, fragment: str) -> Task | None:
        """First task (in insertion order) whose title contains ``fragment``."""
        needle = fragment.lower()
        for task in self._tasks:
            if needle in task.title.lower():
                return task
        return None

    def upcoming(self, now: datetime, days: int | None = None) -> list[Task]:
        """Tasks starting less than ``days`` from now, overdue ones included."""
        horizon = now + timedelta(days=days if days is not None else settings.upcoming_window_days)
        return [t for t in self.all() if t.start < horizon]

    def starting_from(self, start: datetime) -> list[Task]:
        return [t for t in self.all() if t.start >= start]

    def on_day(self, day: date, tzinfo: Any = None) -> list[Task]:
        day_start = datetime.combine(day, datetime.min.time(), tzinfo=tzinfo)
        day_end = day_start + timedelta(days=1)
        return [t for t in self.all() if day_start <= t.start < day_end]

    def __len__(self) -> int:
        return len(self._tasks)


_task_store: TaskStore | None = None


def get_task_store(path: Path | None = None) -> TaskStore:
    """Get the shared task store, creating it on first use.

    Args:
        path: Optional store file; passing one replaces the shared instance

    Returns:
        TaskStore instance
    """
    global _task_store
    if _task_store is None or path is not None:
        _task_store = TaskStore(path)
    return _task_store
