"""Shared builders for booking conversation tests."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

from salonbot.application.use_cases.booking_conversation import ConversationBookingUseCase
from salonbot.domain.entities.branch import Branch
from salonbot.domain.entities.service import Service
from salonbot.domain.entities.staff import Staff
from salonbot.infrastructure.salon.appointment_store import InMemoryAppointmentStore
from salonbot.infrastructure.salon.client_store import InMemoryClientRegistry
from salonbot.infrastructure.salon.directory_store import InMemoryDirectory
from salonbot.infrastructure.salon.seed_loader import SalonSeed
from salonbot.infrastructure.store.memory_store import MemoryConversationStore

TZ = ZoneInfo("Asia/Kolkata")
NOW = datetime(2026, 10, 19, 10, 0, tzinfo=TZ)
TENANT = "tenant-1"
PHONE = "+911234567890"


@dataclass
class BookingHarness:
    engine: ConversationBookingUseCase
    store: MemoryConversationStore
    directory: InMemoryDirectory
    appointments: InMemoryAppointmentStore
    clients: InMemoryClientRegistry
    clock: list[datetime]

    def send(self, text: str, phone: str = PHONE) -> str:
        return self.engine.process_message(phone, text, TENANT)

    def state(self, phone: str = PHONE):
        return self.store.get(phone, now_ts=self.clock[0].timestamp())


def make_service(service_id: str, name: str, price: float = 400, duration: int = 30, **kwargs) -> Service:
    return Service(id=service_id, tenant_id=TENANT, name=name, price=price, duration_minutes=duration, **kwargs)


def make_staff(staff_id: str, name: str, service_ids: tuple[str, ...], role: str = "stylist", **kwargs) -> Staff:
    return Staff(id=staff_id, tenant_id=TENANT, name=name, role=role, service_ids=service_ids, **kwargs)


def build_harness(
    services: list[Service],
    staff: list[Staff],
    branches: list[Branch] | None = None,
    appointments: InMemoryAppointmentStore | None = None,
    now: datetime = NOW,
    idle_timeout_seconds: float = 3600.0,
) -> BookingHarness:
    if branches is None:
        branches = [Branch(id="branch-1", tenant_id=TENANT, name="Main")]
    clock = [now]
    store = MemoryConversationStore(idle_timeout_seconds=idle_timeout_seconds)
    directory = InMemoryDirectory(SalonSeed(branches=branches, services=services, staff=staff))
    appointment_store = appointments or InMemoryAppointmentStore()
    clients = InMemoryClientRegistry()
    engine = ConversationBookingUseCase(
        store=store,
        directory=directory,
        appointments=appointment_store,
        clients=clients,
        timezone=TZ,
        clock=lambda: clock[0],
    )
    return BookingHarness(
        engine=engine,
        store=store,
        directory=directory,
        appointments=appointment_store,
        clients=clients,
        clock=clock,
    )


