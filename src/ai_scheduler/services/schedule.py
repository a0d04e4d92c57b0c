from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class FailureKind(str, Enum):
    UNRESOLVED_TIME = "UnresolvedTime"


@dataclass
class ParsedSchedule:
    title: str
    start: datetime
    who: str = ""
    end: datetime | None = None
    repeat: str = "none"
    remind: str = "15"
    notes: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "who": self.who,
            "start": self.start.isoformat(),
            "end": self.end.isoformat() if self.end else None,
            "repeat": self.repeat,
            "remind": self.remind,
            "notes": self.notes,
        }


@dataclass
class ParseFailure:
    kind: FailureKind
    message: str


@dataclass
class ScheduleResult:
    """Outcome of extracting a schedule: exactly one of the fields is set."""

    schedule: ParsedSchedule | None = None
    failure: ParseFailure | None = None

    @property
    def ok(self) -> bool:
        return self.schedule is not None
