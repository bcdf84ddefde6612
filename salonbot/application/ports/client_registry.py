from abc import ABC, abstractmethod

from salonbot.domain.entities.client import Client


class ClientRegistryPort(ABC):
    @abstractmethod
    def find_or_create(self, tenant_id: str, phone: str, default_name: str) -> Client:
        raise NotImplementedError

    @abstractmethod
    def get_client(self, client_id: str) -> Client | None:
        raise NotImplementedError

    @abstractmethod
    def increment_visits(self, client_id: str) -> None:
        raise NotImplementedError
