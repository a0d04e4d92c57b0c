"""Token matchers for scheduling utterances.

Each recognized fragment of an utterance ("tomorrow", "next monday",
"on 25 aug", "at 3:30pm", "for 30m", "with Sara") is described by one
TokenMatcher. Detectors in the resolver and parsers use ``search`` to read
captures; title derivation uses ``strip`` to cut the same spans out of the
text. All matchers are case-insensitive.
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class TokenMatcher:
    """A named, compiled pattern that can detect and strip one token kind."""

    name: str
    pattern: re.Pattern[str]

    def search(self, text: str) -> re.Match[str] | None:
        return self.pattern.search(text)

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None

    def strip(self, text: str) -> str:
        """Replace every occurrence with a space so neighbouring words never fuse."""
        return self.pattern.sub(" ", text)


def _matcher(name: str, regex: str, flags: int = 0) -> TokenMatcher:
    return TokenMatcher(name=name, pattern=re.compile(regex, re.IGNORECASE | flags))


WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

MONTHS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

_MONTH_NAMES = (
    r"jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?"
    r"|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?"
)

DAY_PARTS = {
    "morning": 9,
    "afternoon": 14,
    "evening": 18,
}

# Date tokens
TOMORROW = _matcher("tomorrow", r"\btomorrow\b")
TODAY = _matcher("today", r"\btoday\b")
ISO_DATE = _matcher("iso_date", r"(?:\bon\s+)?\b(\d{4})-(\d{2})-(\d{2})\b")
WEEKDAY = _matcher("weekday", r"\b(next\s+)?(" + "|".join(WEEKDAYS) + r")\b")
DAY_MONTH = _matcher("day_month", r"(?:\bon\s+)?\b(\d{1,2})\s+(" + _MONTH_NAMES + r")\b")

# Time tokens, in order of preference
TIME_12H = _matcher("time_12h", r"(?:\bat\s+)?\b(\d{1,2})(?::(\d{2}))?\s*(am|pm)\b")
TIME_24H = _matcher("time_24h", r"(?:\bat\s+)?\b(\d{1,2}):(\d{2})\b")
DAY_PART = _matcher(
    "day_part",
    r"\b(?:in\s+the\s+|this\s+)?(" + "|".join(DAY_PARTS) + r")\b",
)
# One matcher per word, consulted in DAY_PARTS order rather than text order
DAY_PART_WORDS = {word: _matcher(word, rf"\b{word}\b") for word in DAY_PARTS}
AT_HOUR = _matcher("at_hour", r"\bat\s+(\d{1,2})\b(?![:.]?\d)")

# Duration tokens, minutes first
DURATION_MINUTES = _matcher("duration_minutes", r"\bfor\s+(\d+)\s*(?:minutes?|mins?|m)\b")
DURATION_HOURS = _matcher("duration_hours", r"\bfor\s+(\d+)\s*(?:hours?|hrs?|h)\b")

# Participant and title framing
PARTICIPANT = _matcher("participant", r"\b(?:with|w/)\s+([a-z0-9 ,._-]+)")
VERB_AND_WITH_CLAUSE = _matcher(
    "verb_and_with_clause",
    r"^\s*(?:schedule|add|create)\b|\b(?:with|w/)\s.*$",
    re.DOTALL,
)

DATE_MATCHERS = (TOMORROW, TODAY, ISO_DATE, WEEKDAY, DAY_MONTH)
TIME_MATCHERS = (TIME_12H, TIME_24H, DAY_PART, AT_HOUR)
DURATION_MATCHERS = (DURATION_MINUTES, DURATION_HOURS)

# Dates before times so "on 25 aug" is gone before "at H" is considered
TITLE_NOISE = DATE_MATCHERS + TIME_MATCHERS + DURATION_MATCHERS


def month_number(name: str) -> int:
    """Map a month name or abbreviation ("Sept", "august") to 1-12."""
    return MONTHS[name[:3].lower()]


def weekday_number(name: str) -> int:
    """Map a weekday name to Python's convention (Monday == 0)."""
    return WEEKDAYS.index(name.lower())
