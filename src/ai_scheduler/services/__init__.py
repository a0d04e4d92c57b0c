"""Scheduler services.

Natural-language schedule extraction plus the task store, reminder and chat
collaborators built around it. Imports are lazy so the CLI only loads what a
command needs.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

_EXPORTS: dict[str, tuple[str, str]] = {
    # Tokens
    "TokenMatcher": ("ai_scheduler.services.tokens", "TokenMatcher"),
    # When
    "WhenResolver": ("ai_scheduler.services.when", "WhenResolver"),
    "next_weekday": ("ai_scheduler.services.when", "next_weekday"),
    "resolve_when": ("ai_scheduler.services.when", "resolve_when"),
    # Duration / participants
    "DurationParser": ("ai_scheduler.services.duration", "DurationParser"),
    "ParticipantParser": ("ai_scheduler.services.participants", "ParticipantParser"),
    # Schedule model
    "FailureKind": ("ai_scheduler.services.schedule", "FailureKind"),
    "ParsedSchedule": ("ai_scheduler.services.schedule", "ParsedSchedule"),
    "ParseFailure": ("ai_scheduler.services.schedule", "ParseFailure"),
    "ScheduleResult": ("ai_scheduler.services.schedule", "ScheduleResult"),
    # Extractor
    "ScheduleExtractor": ("ai_scheduler.services.extractor", "ScheduleExtractor"),
    "derive_title": ("ai_scheduler.services.extractor", "derive_title"),
    "extract_schedule": ("ai_scheduler.services.extractor", "extract_schedule"),
    # Store
    "Task": ("ai_scheduler.services.store", "Task"),
    "TaskNotFoundError": ("ai_scheduler.services.store", "TaskNotFoundError"),
    "TaskStore": ("ai_scheduler.services.store", "TaskStore"),
    "get_task_store": ("ai_scheduler.services.store", "get_task_store"),
    # Reminders
    "Reminder": ("ai_scheduler.services.reminders", "Reminder"),
    "ReminderScheduler": ("ai_scheduler.services.reminders", "ReminderScheduler"),
    "build_reminder": ("ai_scheduler.services.reminders", "build_reminder"),
    # Chat
    "ChatHandler": ("ai_scheduler.services.chat", "ChatHandler"),
    "format_when": ("ai_scheduler.services.formatting", "format_when"),
}

__all__ = list(_EXPORTS.keys())


def __getattr__(name: str) -> Any:
    if name not in _EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr_name = _EXPORTS[name]
    module = import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(_EXPORTS.keys()))
