"""Date and time-of-day resolution for scheduling utterances.

The resolver runs a fixed sequence of date detectors over the text. Each
detector tests the text on its own and, when it matches, overwrites the
running date unconditionally, so with several date tokens present the last
detector in the sequence wins:

    relative day (today/tomorrow) -> ISO date -> weekday -> day + month

Time of day is resolved independently and applied afterwards. All
arithmetic is wall-clock arithmetic on ``now``; tzinfo, if any, is carried
through untouched.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from ai_scheduler.services.tokens import (
    AT_HOUR,
    DAY_MONTH,
    DAY_PART_WORDS,
    DAY_PARTS,
    ISO_DATE,
    TIME_12H,
    TIME_24H,
    TODAY,
    TOMORROW,
    WEEKDAY,
    month_number,
    weekday_number,
)

logger = logging.getLogger(__name__)

DEFAULT_HOUR = 9


@dataclass
class _RunningDate:
    value: datetime
    explicit: bool = False


def next_weekday(start: datetime, weekday: int, force_next: bool) -> datetime:
    """Return the next ``weekday`` on or after ``start`` at 09:00.

    With ``force_next`` the same weekday as ``start`` means a week later
    rather than today.
    """
    diff = (weekday + 7 - start.weekday()) % 7
    if force_next and diff == 0:
        diff = 7
    target = start + timedelta(days=diff)
    return target.replace(hour=DEFAULT_HOUR, minute=0, second=0, microsecond=0)


class WhenResolver:
    """Resolves the start instant of a scheduling utterance."""

    def __init__(self) -> None:
        self._date_detectors: list[Callable[[str, _RunningDate, datetime], bool]] = [
            self._apply_relative_day,
            self._apply_iso_date,
            self._apply_weekday,
            self._apply_day_month,
        ]

    def resolve(self, text: str, now: datetime) -> datetime | None:
        """Resolve ``text`` against the reference instant ``now``.

        Returns None when the text carries no date or time token at all, or
        when the tokens describe an impossible calendar value ("31 feb",
        "25:00"). Impossible values are never rolled over into valid ones.
        """
        running = _RunningDate(value=now)

        try:
            for detector in self._date_detectors:
                detector(text, running, now)

            time_of_day = self.extract_time(text)
            if time_of_day is None and not running.explicit:
                logger.debug(f"No date or time token in {text!r}")
                return None

            hours, minutes = time_of_day or (DEFAULT_HOUR, 0)
            result = running.value.replace(hour=hours, minute=minutes, second=0, microsecond=0)
        except ValueError as e:
            logger.debug(f"Unresolvable date/time in {text!r}: {e}")
            return None

        if not running.explicit and result < now:
            result += timedelta(days=1)

        return result

    def extract_time(self, text: str) -> tuple[int, int] | None:
        """Return (hours, minutes) from the strongest time token, if any."""
        match = TIME_12H.search(text)
        if match:
            hours = int(match.group(1)) % 12
            if match.group(3).lower() == "pm":
                hours += 12
            return hours, int(match.group(2) or 0)

        match = TIME_24H.search(text)
        if match:
            return int(match.group(1)), int(match.group(2))

        for word, matcher in DAY_PART_WORDS.items():
            if matcher.matches(text):
                return DAY_PARTS[word], 0

        match = AT_HOUR.search(text)
        if match:
            return int(match.group(1)), 0

        return None

    def _apply_relative_day(self, text: str, running: _RunningDate, now: datetime) -> bool:
        matched = False
        if TOMORROW.matches(text):
            running.value += timedelta(days=1)
            matched = True
        if TODAY.matches(text):
            matched = True
        if matched:
            running.explicit = True
        return matched

    def _apply_iso_date(self, text: str, running: _RunningDate, now: datetime) -> bool:
        match = ISO_DATE.search(text)
        if not match:
            return False
        year, month, day = (int(g) for g in match.groups())
        running.value = running.value.replace(year=year, month=month, day=day)
        running.explicit = True
        logger.debug(f"ISO date {match.group(0).strip()!r} -> {running.value.date()}")
        return True

    def _apply_weekday(self, text: str, running: _RunningDate, now: datetime) -> bool:
        match = WEEKDAY.search(text)
        if not match:
            return False
        force_next = match.group(1) is not None
        running.value = next_weekday(running.value, weekday_number(match.group(2)), force_next)
        running.explicit = True
        logger.debug(f"Weekday {match.group(0)!r} -> {running.value.date()}")
        return True

    def _apply_day_month(self, text: str, running: _RunningDate, now: datetime) -> bool:
        match = DAY_MONTH.search(text)
        if not match:
            return False
        running.value = running.value.replace(
            year=now.year,
            month=month_number(match.group(2)),
            day=int(match.group(1)),
        )
        running.explicit = True
        logger.debug(f"Day/month {match.group(0).strip()!r} -> {running.value.date()}")
        return True


def resolve_when(text: str, now: datetime) -> datetime | None:
    """Convenience wrapper around WhenResolver.resolve."""
    return WhenResolver().resolve(text, now)
