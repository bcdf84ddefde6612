from __future__ import annotations

import re
from datetime import date, timedelta

TIME_PATTERNS = (
    re.compile(r"\b(\d{1,2}):(\d{2})\s*(am|pm)?\b"),
    re.compile(r"\b(\d{1,2})\s*(am|pm)\b"),
    re.compile(r"\b(\d{1,2})\s*o['’]?\s*clock\b"),
)

DAY_MONTH_PATTERN = re.compile(r"\b(\d{1,2})/(\d{1,2})\b")
ORDINAL_DAY_PATTERN = re.compile(r"\b(\d{1,2})(?:st|nd|rd|th)\b")
BARE_DAY_PATTERN = re.compile(r"\b(\d{1,2})\b")


def extract_time(text: str) -> tuple[int, int] | None:
    """Parse a clock time from text. Returns (hour, minute) in 24-hour form or None."""
    normalized = text.lower().strip()

    for pattern in TIME_PATTERNS:
        for match in pattern.finditer(normalized):
            hour = int(match.group(1))
            minute = 0
            am_pm = None
            if match.lastindex and match.lastindex >= 2:
                second = match.group(2)
                if second and second.isdigit():
                    minute = int(second)
                    am_pm = match.group(3) if match.lastindex >= 3 else None
                else:
                    am_pm = second

            if am_pm == "pm" and hour != 12:
                hour += 12
            elif am_pm == "am" and hour == 12:
                hour = 0

            if 0 <= hour <= 23 and 0 <= minute <= 59:
                return (hour, minute)

    return None


def extract_date(text: str, today: date) -> date | None:
    """
    Parse a booking date from text relative to `today`.

    Recognizes "today", "tomorrow", then day-of-month forms in order: "D/M",
    "Dth" and a bare "D". Time expressions are removed first so "5 pm" is never
    read as the 5th. Every form takes only the day and combines it with the
    current month and year; the first candidate that is a real date and not
    before today wins.
    """
    normalized = text.lower().strip()

    if "today" in normalized:
        return today

    if "tomorrow" in normalized:
        return today + timedelta(days=1)

    remaining = _strip_time_expressions(normalized)

    for match in DAY_MONTH_PATTERN.finditer(remaining):
        candidate = _candidate_date(today, int(match.group(1)))
        if candidate:
            return candidate
    remaining = DAY_MONTH_PATTERN.sub(" ", remaining)

    for match in ORDINAL_DAY_PATTERN.finditer(remaining):
        candidate = _candidate_date(today, int(match.group(1)))
        if candidate:
            return candidate
    remaining = ORDINAL_DAY_PATTERN.sub(" ", remaining)

    for match in BARE_DAY_PATTERN.finditer(remaining):
        candidate = _candidate_date(today, int(match.group(1)))
        if candidate:
            return candidate

    return None


def _strip_time_expressions(text: str) -> str:
    for pattern in TIME_PATTERNS:
        text = pattern.sub(" ", text)
    return text


def _candidate_date(today: date, day: int) -> date | None:
    if not 1 <= day <= 31:
        return None
    try:
        candidate = today.replace(day=day)
    except ValueError:
        return None
    if candidate < today:
        return None
    return candidate


def has_date_expression(text: str) -> bool:
    """True when text carries a day-of-month token, whether or not it resolves to a usable date."""
    remaining = _strip_time_expressions(text.lower())
    return any(
        pattern.search(remaining) for pattern in (DAY_MONTH_PATTERN, ORDINAL_DAY_PATTERN, BARE_DAY_PATTERN)
    )
