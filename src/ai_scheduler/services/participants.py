from ai_scheduler.services.tokens import PARTICIPANT


class ParticipantParser:
    """Reads the "with <name>" / "w/ <name>" participant of an utterance."""

    def parse(self, text: str) -> str:
        # The captured run is returned as matched, trailing spaces included
        match = PARTICIPANT.search(text)
        if match:
            return match.group(1)
        return ""
