from dataclasses import dataclass


@dataclass(frozen=True)
class Branch:
    id: str
    tenant_id: str
    name: str
