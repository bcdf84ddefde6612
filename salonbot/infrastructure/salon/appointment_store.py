from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import replace
from datetime import datetime, timedelta

from salonbot.application.exceptions import SlotUnavailableError
from salonbot.application.ports.appointment_store import AppointmentStorePort
from salonbot.domain.entities.appointment import ACTIVE_STATUSES, STATUS_BOOKED, Appointment


class InMemoryAppointmentStore(AppointmentStorePort):
    def __init__(self, conflict_window_minutes: int = 30) -> None:
        self._appointments: dict[str, Appointment] = {}
        self._conflict_window_minutes = conflict_window_minutes
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def all(self) -> list[Appointment]:
        return list(self._appointments.values())

    def find_conflicting(
        self,
        staff_id: str,
        branch_id: str,
        scheduled_at: datetime,
        window_minutes: int,
        statuses: tuple[str, ...],
    ) -> Appointment | None:
        window = timedelta(minutes=window_minutes)
        for appointment in self._appointments.values():
            if (
                appointment.staff_id == staff_id
                and appointment.branch_id == branch_id
                and appointment.status in statuses
                and abs(appointment.scheduled_at - scheduled_at) <= window
            ):
                return appointment
        return None

    def list_for_staff(
        self,
        staff_id: str,
        branch_id: str,
        start: datetime,
        end: datetime,
        statuses: tuple[str, ...],
    ) -> list[Appointment]:
        return sorted(
            (
                appointment
                for appointment in self._appointments.values()
                if appointment.staff_id == staff_id
                and appointment.branch_id == branch_id
                and appointment.status in statuses
                and start <= appointment.scheduled_at < end
            ),
            key=lambda appointment: appointment.scheduled_at,
        )

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
        # The conflict check and the insert happen under one lock so two
        # confirmations for the same slot cannot both succeed.
        with self._lock:
            if status in ACTIVE_STATUSES and self.find_conflicting(
                staff_id, branch_id, scheduled_at, self._conflict_window_minutes, ACTIVE_STATUSES
            ):
                raise SlotUnavailableError(f"Staff {staff_id} is already booked near {scheduled_at.isoformat()}")

            appointment = Appointment(
                id=uuid.uuid4().hex,
                tenant_id=tenant_id,
                branch_id=branch_id,
                client_id=client_id,
                service_id=service_id,
                staff_id=staff_id,
                scheduled_at=scheduled_at,
                status=status,
            )
            self._appointments[appointment.id] = appointment

        self._logger.info(
            "Appointment created",
            extra={
                "appointment_id": appointment.id,
                "tenant_id": tenant_id,
                "staff_id": staff_id,
                "scheduled_at": scheduled_at.isoformat(),
            },
        )
        return appointment

    def list_due_for_reminder(self, start: datetime, end: datetime) -> list[Appointment]:
        return sorted(
            (
                appointment
                for appointment in self._appointments.values()
                if appointment.status == STATUS_BOOKED
                and appointment.reminder_sent_at is None
                and start <= appointment.scheduled_at <= end
            ),
            key=lambda appointment: appointment.scheduled_at,
        )

    def mark_reminded(self, appointment_id: str, reminded_at: datetime) -> None:
        with self._lock:
            appointment = self._appointments.get(appointment_id)
            if appointment is not None:
                self._appointments[appointment_id] = replace(appointment, reminder_sent_at=reminded_at)
