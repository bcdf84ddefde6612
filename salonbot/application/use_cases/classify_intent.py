from __future__ import annotations

from collections.abc import Iterable

from salonbot.application.utils.message_rules import detect_service_mention, is_booking_request, normalize_text
from salonbot.domain.entities.intent import INTENT_BOOKING, INTENT_GENERAL, IntentClassification


class ClassifyIntentUseCase:
    """Keyword classifier deciding whether a message should enter the booking flow."""

    def execute(self, text: str, service_names: Iterable[str] = ()) -> IntentClassification:
        normalized = normalize_text(text)
        service = detect_service_mention(text, tuple(service_names))
        if service or is_booking_request(text):
            return IntentClassification(intent=INTENT_BOOKING, normalized_text=normalized, service=service)
        return IntentClassification(intent=INTENT_GENERAL, normalized_text=normalized)
