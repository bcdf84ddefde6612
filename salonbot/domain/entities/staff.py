from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Staff:
    id: str
    tenant_id: str
    name: str
    role: str
    is_active: bool = True
    service_ids: tuple[str, ...] = ()
    shift_start: str | None = None  # "HH:MM"
    shift_end: str | None = None  # "HH:MM"
