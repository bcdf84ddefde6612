from __future__ import annotations

from dataclasses import dataclass

INTENT_BOOKING = "booking"
INTENT_GENERAL = "general"


@dataclass(frozen=True)
class IntentClassification:
    intent: str
    normalized_text: str
    service: str | None = None

    @property
    def is_booking(self) -> bool:
        return self.intent == INTENT_BOOKING
