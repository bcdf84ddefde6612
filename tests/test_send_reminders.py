from __future__ import annotations

from datetime import timedelta

from harness import NOW, PHONE, TENANT, TZ, build_harness, make_service, make_staff
from salonbot.application.ports.message_platform import MessagePlatformPort
from salonbot.application.use_cases.send_reminders import SendAppointmentRemindersUseCase
from salonbot.application.use_cases.send_reply import SendReplyUseCase
from salonbot.infrastructure.whatsapp.mock_platform import MockWhatsAppPlatform


def _setup(platform: MessagePlatformPort, enabled: bool = True, lead_minutes: int = 60):
    harness = build_harness(
        services=[make_service("svc-pedicure", "Pedicure")],
        staff=[make_staff("staff-asha", "Asha", ("svc-pedicure",))],
    )
    client = harness.clients.find_or_create(TENANT, PHONE, "WhatsApp Customer")
    use_case = SendAppointmentRemindersUseCase(
        appointments=harness.appointments,
        directory=harness.directory,
        clients=harness.clients,
        send_reply=SendReplyUseCase(platform=platform, enabled=enabled),
        timezone=TZ,
        lead_minutes=lead_minutes,
    )
    return harness, client, use_case


def _book(harness, client_id: str, minutes_from_now: int, status: str = "booked"):
    return harness.appointments.create(
        tenant_id=TENANT,
        branch_id="branch-1",
        client_id=client_id,
        service_id="svc-pedicure",
        staff_id="staff-asha",
        scheduled_at=NOW + timedelta(minutes=minutes_from_now),
        status=status,
    )


def test_reminder_sent_once_for_upcoming_appointment():
    platform = MockWhatsAppPlatform()
    harness, client, use_case = _setup(platform)
    _book(harness, client.id, 45)

    assert use_case.execute(now=NOW) == 1
    assert platform.sent == [(PHONE, "Reminder: Your appointment for Pedicure with Asha is in 1 hour at 10:45 AM.")]

    assert use_case.execute(now=NOW + timedelta(minutes=15)) == 0
    assert len(platform.sent) == 1


def test_appointments_outside_window_or_not_booked_are_skipped():
    platform = MockWhatsAppPlatform()
    harness, client, use_case = _setup(platform)
    _book(harness, client.id, 120)
    _book(harness, client.id, -10)
    _book(harness, client.id, 30, status="ongoing")

    assert use_case.execute(now=NOW) == 0
    assert platform.sent == []


class BrokenPlatform(MessagePlatformPort):
    def send_text(self, recipient_id: str, text: str) -> None:
        raise RuntimeError("provider down")


def test_send_failure_leaves_appointment_for_next_run():
    harness, client, use_case = _setup(BrokenPlatform())
    appointment = _book(harness, client.id, 30)

    assert use_case.execute(now=NOW) == 0
    assert harness.appointments.list_due_for_reminder(NOW, NOW + timedelta(hours=1)) == [appointment]


def test_disabled_replies_are_not_marked_as_reminded():
    platform = MockWhatsAppPlatform()
    harness, client, use_case = _setup(platform, enabled=False)
    _book(harness, client.id, 30)

    assert use_case.execute(now=NOW) == 0
    assert len(harness.appointments.list_due_for_reminder(NOW, NOW + timedelta(hours=1))) == 1


def test_reminder_wording_follows_lead_time():
    platform = MockWhatsAppPlatform()
    harness, client, use_case = _setup(platform, lead_minutes=120)
    _book(harness, client.id, 90)

    assert use_case.execute(now=NOW) == 1
    assert platform.sent[0][1] == "Reminder: Your appointment for Pedicure with Asha is in 2 hours at 11:30 AM."
