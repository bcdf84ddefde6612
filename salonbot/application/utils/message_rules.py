from __future__ import annotations

import re

BOOKING_KEYWORDS = (
    "book",
    "appointment",
    "schedule",
)

# Common ways customers name services, mapped to a canonical service word.
SERVICE_SYNONYMS = {
    "haircut": "haircut",
    "hair cut": "haircut",
    "pedicure": "pedicure",
    "manicure": "manicure",
    "facial": "facial",
    "massage": "massage",
}

CANCEL_PHRASES = ("cancel", "start over")


def normalize_text(text: str) -> str:
    normalized = text.lower()
    normalized = re.sub(r"[^\w\s]", " ", normalized)
    normalized = re.sub(r"\s+", " ", normalized).strip()
    return normalized


def is_cancel_request(text: str) -> bool:
    normalized = text.lower().strip()
    return any(phrase in normalized for phrase in CANCEL_PHRASES)


def is_booking_request(text: str) -> bool:
    normalized = normalize_text(text)
    return any(keyword in normalized for keyword in BOOKING_KEYWORDS)


def detect_service_mention(text: str, service_names: tuple[str, ...] = ()) -> str | None:
    """Return the first known synonym or tenant service name mentioned in text."""
    normalized = normalize_text(text)
    if not normalized:
        return None
    for keyword, service in SERVICE_SYNONYMS.items():
        if keyword in normalized:
            return service
    for name in service_names:
        name_normalized = normalize_text(name)
        if name_normalized and name_normalized in normalized:
            return name
    return None
