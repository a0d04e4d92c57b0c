from datetime import datetime


def format_when(dt: datetime) -> str:
    """Medium date, short time: "Aug 25, 2026, 3:30 PM"."""
    hour = dt.hour % 12 or 12
    return f"{dt:%b} {dt.day}, {dt.year}, {hour}:{dt:%M} {dt:%p}"
