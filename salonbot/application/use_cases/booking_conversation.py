from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from salonbot.application.exceptions import SlotUnavailableError
from salonbot.application.ports.appointment_store import AppointmentStorePort
from salonbot.application.ports.client_registry import ClientRegistryPort
from salonbot.application.ports.conversation_store import ConversationStorePort
from salonbot.application.ports.directory import DirectoryPort
from salonbot.application.utils.date_parser import extract_date, extract_time, has_date_expression
from salonbot.application.utils.message_rules import detect_service_mention, is_cancel_request, normalize_text
from salonbot.application.utils.slots import compute_available_slots
from salonbot.domain.entities.appointment import ACTIVE_STATUSES, STATUS_BOOKED
from salonbot.domain.entities.conversation_state import (
    ConfirmStep,
    ConversationState,
    DateStep,
    ServiceChoice,
    ServiceStep,
    StaffChoice,
    StaffStep,
    TimeStep,
)
from salonbot.domain.entities.service import Service

DEFAULT_CLIENT_NAME = "WhatsApp Customer"
MAX_LISTED_SERVICES = 10
MAX_SUGGESTED_SLOTS = 5

REPLY_CANCELLED = "Booking cancelled. How can I help you today?"
REPLY_NOT_UNDERSTOOD = 'I didn\'t understand that. Please try again or type "cancel" to start over.'
REPLY_START_OVER = "Missing information. Please start over."
REPLY_NO_SERVICES = "Sorry, no services available at the moment."
REPLY_ASK_DATE_TIME = 'Please provide a date and time. For example: "today at 5 PM" or "tomorrow at 10 AM"'
REPLY_ASK_TIME = 'Please provide a time. For example: "5 PM" or "10:30 AM"'
REPLY_DATE_UNAVAILABLE = 'I couldn\'t use that date. Please pick today or a later day this month, or say "tomorrow".'
REPLY_TIME_PASSED = "That time has already passed. Please choose a later time or another day."
REPLY_NO_STAFF = "Sorry, no staff available for this service."
REPLY_INVALID_STAFF = "Please select a valid staff member from the list."
REPLY_SLOT_TAKEN = "Sorry, that time slot is no longer available. Please choose another time."
REPLY_BOOKING_FAILED = "Sorry, there was an error creating your appointment. Please try again or call us."


@dataclass(frozen=True)
class StepResult:
    """
    Outcome of one step handler.

    `reply` is None when the handler advanced the state and the next step should
    run on the same message. `state` is None when the conversation ends.
    """

    state: ConversationState | None
    reply: str | None


class ConversationBookingUseCase:
    def __init__(
        self,
        store: ConversationStorePort,
        directory: DirectoryPort,
        appointments: AppointmentStorePort,
        clients: ClientRegistryPort,
        timezone: ZoneInfo,
        conflict_window_minutes: int = 30,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._directory = directory
        self._appointments = appointments
        self._clients = clients
        self._timezone = timezone
        self._conflict_window_minutes = conflict_window_minutes
        self._clock = clock or (lambda: datetime.now(self._timezone))
        self._logger = logging.getLogger(__name__)

    def has_active_conversation(self, phone: str) -> bool:
        return self._store.get(phone, now_ts=self._clock().timestamp()) is not None

    def process_message(self, phone: str, text: str, tenant_id: str | None = None) -> str:
        now = self._clock()
        state = self._store.get(phone, now_ts=now.timestamp())
        if state is None:
            state = ConversationState(phone=phone, tenant_id=tenant_id)
        elif state.tenant_id is None and tenant_id:
            state = replace(state, tenant_id=tenant_id)

        if is_cancel_request(text):
            self._store.delete(phone)
            self._logger.info("Booking cancelled", extra={"phone": phone, "step": state.step.value})
            return REPLY_CANCELLED

        current = state
        # Each step either replies or hands over to a later step, so one pass per step is enough.
        for _ in range(5):
            result = self._run_step(current, text, now)
            if result.reply is not None:
                self._commit(phone, result.state, now)
                return result.reply
            if result.state is None:
                break
            current = result.state

        self._commit(phone, state, now)
        return REPLY_NOT_UNDERSTOOD

    def _run_step(self, state: ConversationState, text: str, now: datetime) -> StepResult:
        step_state = state.step_state
        if isinstance(step_state, ServiceStep):
            return self._handle_service(state, text)
        if isinstance(step_state, DateStep):
            return self._handle_date(state, step_state, text, now)
        if isinstance(step_state, TimeStep):
            return self._handle_time(state, step_state, text, now)
        if isinstance(step_state, StaffStep):
            return self._handle_staff(state, step_state, text)
        if isinstance(step_state, ConfirmStep):
            return self._handle_confirm(state, step_state, now)
        raise TypeError(f"Unknown booking step: {type(step_state).__name__}")

    def _commit(self, phone: str, state: ConversationState | None, now: datetime) -> None:
        if state is None:
            self._store.delete(phone)
            return
        self._store.set(phone, replace(state, updated_at=now.timestamp()))

    def _handle_service(self, state: ConversationState, text: str) -> StepResult:
        services = self._directory.list_active_services(state.tenant_id or "")
        service = _match_service(services, text)

        if service is None:
            if not services:
                return StepResult(state, REPLY_NO_SERVICES)
            lines = [
                f"{index}. {item.name} - ₹{_format_price(item.price)}"
                for index, item in enumerate(services[:MAX_LISTED_SERVICES], start=1)
            ]
            service_list = "\n".join(lines)
            return StepResult(
                state,
                f"Please select a service:\n\n{service_list}\n\nReply with the service name or number.",
            )

        branches = self._directory.list_branches(state.tenant_id or "")
        branch_id = branches[0].id if len(branches) == 1 else None

        self._logger.info(
            "Service selected",
            extra={"phone": state.phone, "service": service.name, "tenant_id": state.tenant_id},
        )
        updated = replace(
            state,
            step_state=DateStep(
                service=ServiceChoice(service_id=service.id, service_name=service.name),
                branch_id=branch_id,
            ),
        )
        return StepResult(
            updated,
            f'Great! I found "{service.name}" (₹{_format_price(service.price)}, {service.duration_minutes} min).'
            '\n\nWhen would you like to book? (e.g., "today at 5 PM" or "tomorrow at 10 AM")',
        )

    def _handle_date(self, state: ConversationState, step: DateStep, text: str, now: datetime) -> StepResult:
        selected_date = extract_date(text, now.date())
        selected_clock = extract_time(text)

        if selected_date is None and has_date_expression(text):
            return StepResult(state, REPLY_DATE_UNAVAILABLE)

        if selected_date and selected_clock:
            selected_time = self._combine(selected_date, selected_clock)
            if selected_time <= now:
                return StepResult(state, REPLY_TIME_PASSED)
            return self._to_staff_step(state, step.service, step.branch_id, selected_time)

        if selected_date:
            updated = replace(
                state,
                step_state=TimeStep(service=step.service, selected_date=selected_date, branch_id=step.branch_id),
            )
            return StepResult(
                updated,
                f"Got it! Date: {selected_date:%d %b %Y}"
                '\n\nWhat time would you prefer? (e.g., "5 PM" or "10:30 AM")',
            )

        if selected_clock:
            selected_time = self._combine(now.date(), selected_clock)
            if selected_time <= now:
                return StepResult(state, REPLY_TIME_PASSED)
            return self._to_staff_step(state, step.service, step.branch_id, selected_time)

        return StepResult(state, REPLY_ASK_DATE_TIME)

    def _handle_time(self, state: ConversationState, step: TimeStep, text: str, now: datetime) -> StepResult:
        selected_clock = extract_time(text)
        if not selected_clock:
            return StepResult(state, REPLY_ASK_TIME)
        selected_time = self._combine(step.selected_date, selected_clock)
        if selected_time <= now:
            return StepResult(state, REPLY_TIME_PASSED)
        return self._to_staff_step(state, step.service, step.branch_id, selected_time)

    def _to_staff_step(
        self,
        state: ConversationState,
        service: ServiceChoice,
        branch_id: str | None,
        selected_time: datetime,
    ) -> StepResult:
        if branch_id is None:
            self._logger.warning(
                "Branch could not be resolved; clearing conversation",
                extra={"phone": state.phone, "tenant_id": state.tenant_id, "reason": "missing_branch"},
            )
            return StepResult(None, REPLY_START_OVER)
        updated = replace(
            state,
            step_state=StaffStep(service=service, branch_id=branch_id, selected_time=selected_time),
        )
        return StepResult(updated, None)

    def _handle_staff(self, state: ConversationState, step: StaffStep, text: str) -> StepResult:
        if step.available_staff:
            choice = _match_staff(step.available_staff, text)
            if choice is None:
                return StepResult(state, REPLY_INVALID_STAFF)
            return StepResult(self._to_confirm_step(state, step, choice), None)

        if self._directory.get_service(step.service.service_id) is None:
            return StepResult(None, "Service not found. Please start over.")

        eligible = [
            StaffChoice(staff_id=member.id, name=member.name, role=member.role)
            for member in self._directory.list_service_staff(step.service.service_id)
            if member.is_active
        ]

        if not eligible:
            return StepResult(state, REPLY_NO_STAFF)

        if len(eligible) == 1:
            return StepResult(self._to_confirm_step(state, step, eligible[0]), None)

        updated = replace(state, step_state=replace(step, available_staff=tuple(eligible)))
        staff_list = "\n".join(
            f"{index}. {member.name} ({member.role})" for index, member in enumerate(eligible, start=1)
        )
        return StepResult(updated, f"Please select a staff member:\n\n{staff_list}\n\nReply with the name or number.")

    def _to_confirm_step(self, state: ConversationState, step: StaffStep, staff: StaffChoice) -> ConversationState:
        return replace(
            state,
            step_state=ConfirmStep(
                service=step.service,
                branch_id=step.branch_id,
                selected_time=step.selected_time,
                staff=staff,
            ),
        )

    def _handle_confirm(self, state: ConversationState, step: ConfirmStep, now: datetime) -> StepResult:
        tenant_id = state.tenant_id or ""
        client = self._clients.find_or_create(tenant_id, state.phone, DEFAULT_CLIENT_NAME)

        conflict = self._appointments.find_conflicting(
            staff_id=step.staff.staff_id,
            branch_id=step.branch_id,
            scheduled_at=step.selected_time,
            window_minutes=self._conflict_window_minutes,
            statuses=ACTIVE_STATUSES,
        )
        if conflict is not None:
            return self._slot_taken(state, step, now)

        try:
            appointment = self._appointments.create(
                tenant_id=tenant_id,
                branch_id=step.branch_id,
                client_id=client.id,
                service_id=step.service.service_id,
                staff_id=step.staff.staff_id,
                scheduled_at=step.selected_time,
                status=STATUS_BOOKED,
            )
            self._clients.increment_visits(client.id)
        except SlotUnavailableError:
            return self._slot_taken(state, step, now)
        except Exception as e:
            self._logger.error(
                "Error creating appointment",
                extra={"phone": state.phone, "tenant_id": tenant_id, "error": str(e)},
            )
            return StepResult(state, REPLY_BOOKING_FAILED)

        self._logger.info(
            "Appointment booked",
            extra={"phone": state.phone, "tenant_id": tenant_id, "appointment_id": appointment.id},
        )
        return StepResult(
            None,
            "✅ Appointment confirmed!"
            f"\n\nService: {step.service.service_name}"
            f"\nStaff: {step.staff.name}"
            f"\nDate & Time: {step.selected_time:%Y-%m-%d} at {step.selected_time:%H:%M}"
            "\n\nWe'll send you a reminder 1 hour before. See you soon!",
        )

    def _slot_taken(self, state: ConversationState, step: ConfirmStep, now: datetime) -> StepResult:
        """Send the user back to picking a time on the same date, with free slots when known."""
        selected_date = step.selected_time.date()
        self._logger.info(
            "Slot no longer available",
            extra={"phone": state.phone, "staff_id": step.staff.staff_id, "reason": "conflict"},
        )
        updated = replace(
            state,
            step_state=TimeStep(service=step.service, selected_date=selected_date, branch_id=step.branch_id),
        )
        slots = self._free_slots(step.staff.staff_id, step.branch_id, selected_date, now)
        if not slots:
            return StepResult(updated, REPLY_SLOT_TAKEN)
        times = ", ".join(f"{slot:%I:%M %p}" for slot in slots[:MAX_SUGGESTED_SLOTS])
        return StepResult(updated, f"{REPLY_SLOT_TAKEN}\n\nAvailable times on {selected_date:%d %b}: {times}")

    def _free_slots(self, staff_id: str, branch_id: str, day: date, now: datetime) -> list[datetime]:
        staff = self._directory.get_staff(staff_id)
        if staff is None:
            return []
        day_start = datetime.combine(day, time.min, tzinfo=self._timezone)
        booked = self._appointments.list_for_staff(
            staff_id=staff_id,
            branch_id=branch_id,
            start=day_start,
            end=day_start + timedelta(days=1),
            statuses=ACTIVE_STATUSES,
        )
        return compute_available_slots(
            day=day,
            shift_start=staff.shift_start,
            shift_end=staff.shift_end,
            booked=[appointment.scheduled_at for appointment in booked],
            now=now,
            window_minutes=self._conflict_window_minutes,
        )

    def _combine(self, day: date, clock: tuple[int, int]) -> datetime:
        hour, minute = clock
        return datetime.combine(day, time(hour, minute), tzinfo=self._timezone)


def _match_service(services: list[Service], text: str) -> Service | None:
    normalized = text.lower().strip()
    if not normalized:
        return None

    if normalized.isdigit():
        index = int(normalized)
        listed = services[:MAX_LISTED_SERVICES]
        if 1 <= index <= len(listed):
            return listed[index - 1]
        return None

    for service in services:
        name = service.name.lower()
        description = (service.description or "").lower()
        if name in normalized or normalized in name or (description and normalized in description):
            return service

    # "hair cut" and similar spellings resolve through the synonym table
    mention = detect_service_mention(text)
    if mention:
        for service in services:
            if mention in normalize_text(service.name):
                return service
    return None


def _match_staff(candidates: tuple[StaffChoice, ...], text: str) -> StaffChoice | None:
    normalized = text.lower().strip()
    if not normalized:
        return None
    for index, candidate in enumerate(candidates, start=1):
        name = candidate.name.lower()
        if normalized == str(index) or normalized in name or name in normalized:
            return candidate
    return None


def _format_price(price: float) -> str:
    if float(price).is_integer():
        return str(int(price))
    return f"{price:.2f}"
