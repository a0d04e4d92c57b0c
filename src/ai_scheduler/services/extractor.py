"""Schedule extraction from free-form utterances.

Turns "schedule standup tomorrow at 9am for 15m" into a ParsedSchedule:
title "standup", start tomorrow 09:00, end tomorrow 09:15. Participant and
duration are read independently of the date; the title is whatever is left
once every recognized token has been cut out.
"""

import logging
import re
from datetime import datetime, timedelta

from ai_scheduler.config import settings
from ai_scheduler.services.duration import DurationParser
from ai_scheduler.services.participants import ParticipantParser
from ai_scheduler.services.schedule import (
    FailureKind,
    ParsedSchedule,
    ParseFailure,
    ScheduleResult,
)
from ai_scheduler.services.tokens import TITLE_NOISE, VERB_AND_WITH_CLAUSE
from ai_scheduler.services.when import WhenResolver

logger = logging.getLogger(__name__)

UNRESOLVED_TIME_MESSAGE = "Could not parse time/date"
UNTITLED = "Untitled"

_WHITESPACE = re.compile(r"\s+")


def _strip_once(text: str) -> str:
    title = VERB_AND_WITH_CLAUSE.strip(text)
    for matcher in TITLE_NOISE:
        title = matcher.strip(title)
    return _WHITESPACE.sub(" ", title).strip()


def derive_title(text: str) -> str:
    """Strip the verb, the with-clause and every date/time/duration token.

    Stripping repeats until nothing changes, so a derived title fed back in
    comes out unchanged ("schedule add review" ends as "review", not "add
    review").
    """
    title = text
    while True:
        stripped = _strip_once(title)
        if stripped == title:
            break
        title = stripped
    return title or UNTITLED


class ScheduleExtractor:
    """Assembles a ParsedSchedule from an utterance and a reference instant."""

    def __init__(
        self,
        resolver: WhenResolver | None = None,
        duration_parser: DurationParser | None = None,
        participant_parser: ParticipantParser | None = None,
        default_remind: str | None = None,
    ):
        self.resolver = resolver or WhenResolver()
        self.duration_parser = duration_parser or DurationParser()
        self.participant_parser = participant_parser or ParticipantParser()
        self.default_remind = default_remind or settings.default_remind

    def extract(self, text: str, now: datetime) -> ScheduleResult:
        who = self.participant_parser.parse(text)
        duration = self.duration_parser.parse(text)

        start = self.resolver.resolve(text, now)
        if start is None:
            logger.info(f"Could not resolve a start time from {text!r}")
            return self._unresolved()

        try:
            end = start + timedelta(minutes=duration) if duration > 0 else None
        except OverflowError as e:
            logger.info(f"Duration of {duration} minutes in {text!r} is out of range: {e}")
            return self._unresolved()

        schedule = ParsedSchedule(
            title=derive_title(text),
            who=who,
            start=start,
            end=end,
            repeat="none",
            remind=self.default_remind,
            notes="",
        )
        logger.debug(f"Extracted {schedule!r} from {text!r}")
        return ScheduleResult(schedule=schedule)

    @staticmethod
    def _unresolved() -> ScheduleResult:
        return ScheduleResult(
            failure=ParseFailure(
                kind=FailureKind.UNRESOLVED_TIME,
                message=UNRESOLVED_TIME_MESSAGE,
            )
        )


def extract_schedule(text: str, now: datetime) -> ScheduleResult:
    """Convenience wrapper around ScheduleExtractor.extract."""
    return ScheduleExtractor().extract(text, now)
