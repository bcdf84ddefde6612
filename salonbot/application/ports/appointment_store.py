from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from salonbot.domain.entities.appointment import Appointment


class AppointmentStorePort(ABC):
    @abstractmethod
    def find_conflicting(
        self,
        staff_id: str,
        branch_id: str,
        scheduled_at: datetime,
        window_minutes: int,
        statuses: tuple[str, ...],
    ) -> Appointment | None:
        """First appointment of the staff member at the branch within +/- window_minutes of scheduled_at."""
        raise NotImplementedError

    @abstractmethod
    def list_for_staff(
        self,
        staff_id: str,
        branch_id: str,
        start: datetime,
        end: datetime,
        statuses: tuple[str, ...],
    ) -> list[Appointment]:
        raise NotImplementedError

    @abstractmethod
    def create(
        self,
        tenant_id: str,
        branch_id: str,
        client_id: str,
        service_id: str,
        staff_id: str,
        scheduled_at: datetime,
        status: str,
    ) -> Appointment:
        """Persist a booking. Raises AppointmentStoreError (or SlotUnavailableError) on failure."""
        raise NotImplementedError

    @abstractmethod
    def list_due_for_reminder(self, start: datetime, end: datetime) -> list[Appointment]:
        """Booked appointments scheduled within [start, end] that have not been reminded yet."""
        raise NotImplementedError

    @abstractmethod
    def mark_reminded(self, appointment_id: str, reminded_at: datetime) -> None:
        raise NotImplementedError
