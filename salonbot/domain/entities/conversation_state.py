from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import ClassVar, Union


class BookingStep(str, Enum):
    SELECTING_SERVICE = "selecting_service"
    SELECTING_DATE = "selecting_date"
    SELECTING_TIME = "selecting_time"
    SELECTING_STAFF = "selecting_staff"
    CONFIRMING = "confirming"


@dataclass(frozen=True)
class ServiceChoice:
    service_id: str
    service_name: str


@dataclass(frozen=True)
class StaffChoice:
    staff_id: str
    name: str
    role: str


@dataclass(frozen=True)
class ServiceStep:
    step: ClassVar[BookingStep] = BookingStep.SELECTING_SERVICE


@dataclass(frozen=True)
class DateStep:
    step: ClassVar[BookingStep] = BookingStep.SELECTING_DATE

    service: ServiceChoice
    branch_id: str | None = None


@dataclass(frozen=True)
class TimeStep:
    step: ClassVar[BookingStep] = BookingStep.SELECTING_TIME

    service: ServiceChoice
    selected_date: date
    branch_id: str | None = None


@dataclass(frozen=True)
class StaffStep:
    """Waiting for a staff member; `available_staff` is empty until candidates were listed."""

    step: ClassVar[BookingStep] = BookingStep.SELECTING_STAFF

    service: ServiceChoice
    branch_id: str
    selected_time: datetime
    available_staff: tuple[StaffChoice, ...] = ()


@dataclass(frozen=True)
class ConfirmStep:
    step: ClassVar[BookingStep] = BookingStep.CONFIRMING

    service: ServiceChoice
    branch_id: str
    selected_time: datetime
    staff: StaffChoice


StepState = Union[ServiceStep, DateStep, TimeStep, StaffStep, ConfirmStep]


@dataclass(frozen=True)
class ConversationState:
    phone: str
    tenant_id: str | None = None
    step_state: StepState = field(default_factory=ServiceStep)
    updated_at: float | None = None  # epoch seconds of the last write

    @property
    def step(self) -> BookingStep:
        return self.step_state.step
