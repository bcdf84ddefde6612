from __future__ import annotations

from abc import ABC, abstractmethod

from salonbot.domain.entities.branch import Branch
from salonbot.domain.entities.service import Service
from salonbot.domain.entities.staff import Staff


class DirectoryPort(ABC):
    @abstractmethod
    def list_active_services(self, tenant_id: str) -> list[Service]:
        """Active services of a tenant, in directory order."""
        raise NotImplementedError

    @abstractmethod
    def get_service(self, service_id: str) -> Service | None:
        raise NotImplementedError

    @abstractmethod
    def list_branches(self, tenant_id: str) -> list[Branch]:
        raise NotImplementedError

    @abstractmethod
    def list_service_staff(self, service_id: str) -> list[Staff]:
        """Staff explicitly linked to a service, active or not."""
        raise NotImplementedError

    @abstractmethod
    def get_staff(self, staff_id: str) -> Staff | None:
        raise NotImplementedError
