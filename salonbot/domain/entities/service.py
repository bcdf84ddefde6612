from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Service:
    id: str
    tenant_id: str
    name: str
    price: float
    duration_minutes: int
    description: str | None = None
    is_active: bool = True
