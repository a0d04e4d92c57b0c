from ai_scheduler.services.tokens import DURATION_HOURS, DURATION_MINUTES


class DurationParser:
    """Reads "for N minutes" / "for N hours" durations. Total: 0 when absent."""

    def parse(self, text: str) -> int:
        match = DURATION_MINUTES.search(text)
        if match:
            return int(match.group(1))

        match = DURATION_HOURS.search(text)
        if match:
            return int(match.group(1)) * 60

        return 0
