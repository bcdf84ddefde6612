from __future__ import annotations

from salonbot.application.ports.directory import DirectoryPort
from salonbot.domain.entities.branch import Branch
from salonbot.domain.entities.service import Service
from salonbot.domain.entities.staff import Staff
from salonbot.infrastructure.salon.seed_loader import SalonSeed


class InMemoryDirectory(DirectoryPort):
    def __init__(self, seed: SalonSeed | None = None) -> None:
        seed = seed or SalonSeed()
        self._services: list[Service] = list(seed.services)
        self._branches: list[Branch] = list(seed.branches)
        self._staff: list[Staff] = list(seed.staff)

    def list_active_services(self, tenant_id: str) -> list[Service]:
        return [service for service in self._services if service.tenant_id == tenant_id and service.is_active]

    def get_service(self, service_id: str) -> Service | None:
        return next((service for service in self._services if service.id == service_id), None)

    def list_branches(self, tenant_id: str) -> list[Branch]:
        return [branch for branch in self._branches if branch.tenant_id == tenant_id]

    def list_service_staff(self, service_id: str) -> list[Staff]:
        return [member for member in self._staff if service_id in member.service_ids]

    def get_staff(self, staff_id: str) -> Staff | None:
        return next((member for member in self._staff if member.id == staff_id), None)
