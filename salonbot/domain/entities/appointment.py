from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

STATUS_BOOKED = "booked"
STATUS_ONGOING = "ongoing"

# Statuses that occupy a staff member's time.
ACTIVE_STATUSES = (STATUS_BOOKED, STATUS_ONGOING)


@dataclass(frozen=True)
class Appointment:
    id: str
    tenant_id: str
    branch_id: str
    client_id: str
    service_id: str
    staff_id: str
    scheduled_at: datetime
    status: str = STATUS_BOOKED
    reminder_sent_at: datetime | None = None
