from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, time, timedelta

DEFAULT_SHIFT_START_HOUR = 9
DEFAULT_SHIFT_END_HOUR = 18


def compute_available_slots(
    day: date,
    shift_start: str | None,
    shift_end: str | None,
    booked: Iterable[datetime],
    now: datetime,
    interval_minutes: int = 30,
    window_minutes: int = 30,
) -> list[datetime]:
    """
    Candidate start times for one staff member on `day`.

    Slots step through the shift window every `interval_minutes`; a slot is
    dropped when it lies in the past or within `window_minutes` of a booking,
    matching the conflict rule applied at confirmation.
    """
    start_hour = _parse_hour(shift_start, DEFAULT_SHIFT_START_HOUR)
    end_hour = _parse_hour(shift_end, DEFAULT_SHIFT_END_HOUR)
    window = timedelta(minutes=window_minutes)
    booked_times = list(booked)

    slots: list[datetime] = []
    for hour in range(start_hour, end_hour):
        for minute in range(0, 60, interval_minutes):
            slot = datetime.combine(day, time(hour, minute), tzinfo=now.tzinfo)
            if slot <= now:
                continue
            if any(abs(booked_at - slot) <= window for booked_at in booked_times):
                continue
            slots.append(slot)
    return slots


def _parse_hour(value: str | None, default: int) -> int:
    if not value:
        return default
    try:
        hour = int(value.split(":", 1)[0])
    except ValueError:
        return default
    return hour if 0 <= hour <= 24 else default
