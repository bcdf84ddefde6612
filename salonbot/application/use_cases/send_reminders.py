from __future__ import annotations

import logging
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from salonbot.application.ports.appointment_store import AppointmentStorePort
from salonbot.application.ports.client_registry import ClientRegistryPort
from salonbot.application.ports.directory import DirectoryPort
from salonbot.application.use_cases.send_reply import SendReplyUseCase


class SendAppointmentRemindersUseCase:
    """Send a WhatsApp reminder for every booked appointment starting within the lead time."""

    def __init__(
        self,
        appointments: AppointmentStorePort,
        directory: DirectoryPort,
        clients: ClientRegistryPort,
        send_reply: SendReplyUseCase,
        timezone: ZoneInfo,
        lead_minutes: int = 60,
    ) -> None:
        self._appointments = appointments
        self._directory = directory
        self._clients = clients
        self._send_reply = send_reply
        self._timezone = timezone
        self._lead_minutes = lead_minutes
        self._logger = logging.getLogger(__name__)

    def execute(self, now: datetime | None = None) -> int:
        now = now or datetime.now(self._timezone)
        due = self._appointments.list_due_for_reminder(now, now + timedelta(minutes=self._lead_minutes))

        sent = 0
        for appointment in due:
            client = self._clients.get_client(appointment.client_id)
            if client is None:
                self._logger.warning(
                    "Reminder skipped, client missing",
                    extra={"appointment_id": appointment.id, "reason": "client_missing"},
                )
                continue

            service = self._directory.get_service(appointment.service_id)
            staff = self._directory.get_staff(appointment.staff_id)
            service_name = service.name if service else "your service"
            staff_name = staff.name if staff else "our team"
            scheduled = appointment.scheduled_at.astimezone(self._timezone)
            text = (
                f"Reminder: Your appointment for {service_name} with {staff_name} "
                f"is in {_lead_time_phrase(self._lead_minutes)} at {scheduled:%I:%M %p}."
            )

            try:
                delivered = self._send_reply.execute(recipient_id=client.phone, text=text)
            except Exception as e:
                self._logger.error(
                    "Error sending appointment reminder",
                    extra={"appointment_id": appointment.id, "error": str(e)},
                )
                continue

            if delivered:
                self._appointments.mark_reminded(appointment.id, now)
                sent += 1

        self._logger.info("Reminder run finished", extra={"due": len(due), "sent": sent})
        return sent


def _lead_time_phrase(minutes: int) -> str:
    if minutes % 60 == 0:
        hours = minutes // 60
        return "1 hour" if hours == 1 else f"{hours} hours"
    return "1 minute" if minutes == 1 else f"{minutes} minutes"
