from dataclasses import dataclass


@dataclass(frozen=True)
class Client:
    id: str
    tenant_id: str
    phone: str
    name: str
    total_visits: int = 0
