from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import replace

from salonbot.application.ports.client_registry import ClientRegistryPort
from salonbot.domain.entities.client import Client


class InMemoryClientRegistry(ClientRegistryPort):
    def __init__(self) -> None:
        self._clients: dict[str, Client] = {}
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def find_or_create(self, tenant_id: str, phone: str, default_name: str) -> Client:
        with self._lock:
            for client in self._clients.values():
                if client.tenant_id == tenant_id and client.phone == phone:
                    return client

            client = Client(id=uuid.uuid4().hex, tenant_id=tenant_id, phone=phone, name=default_name)
            self._clients[client.id] = client
            self._logger.info("Client created", extra={"client_id": client.id, "tenant_id": tenant_id})
            return client

    def get_client(self, client_id: str) -> Client | None:
        return self._clients.get(client_id)

    def increment_visits(self, client_id: str) -> None:
        with self._lock:
            client = self._clients.get(client_id)
            if client is None:
                raise KeyError(f"Unknown client: {client_id}")
            self._clients[client_id] = replace(client, total_visits=client.total_visits + 1)
