from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from salonbot.domain.entities.branch import Branch
from salonbot.domain.entities.service import Service
from salonbot.domain.entities.staff import Staff

DEFAULT_SEED_FILE = Path(__file__).with_name("seed_data.json")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SalonSeed:
    branches: list[Branch] = field(default_factory=list)
    services: list[Service] = field(default_factory=list)
    staff: list[Staff] = field(default_factory=list)


def load_salon_seed(path: str | Path | None = None) -> SalonSeed:
    """Load tenant directory data (branches, services, staff) from a JSON file."""
    seed_path = Path(path) if path else DEFAULT_SEED_FILE
    with open(seed_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    seed = parse_salon_seed(data)
    logger.info(
        "Salon seed loaded",
        extra={
            "path": str(seed_path),
            "branches": len(seed.branches),
            "services": len(seed.services),
            "staff": len(seed.staff),
        },
    )
    return seed


def parse_salon_seed(data: dict[str, Any]) -> SalonSeed:
    branches = [
        Branch(id=str(item["id"]), tenant_id=str(item["tenant_id"]), name=str(item.get("name", "")))
        for item in data.get("branches", [])
    ]
    services = [
        Service(
            id=str(item["id"]),
            tenant_id=str(item["tenant_id"]),
            name=str(item["name"]),
            price=float(item.get("price", 0)),
            duration_minutes=int(item.get("duration_minutes", 30)),
            description=item.get("description"),
            is_active=bool(item.get("is_active", True)),
        )
        for item in data.get("services", [])
    ]
    staff = [
        Staff(
            id=str(item["id"]),
            tenant_id=str(item["tenant_id"]),
            name=str(item["name"]),
            role=str(item.get("role", "staff")),
            is_active=bool(item.get("is_active", True)),
            service_ids=tuple(str(service_id) for service_id in item.get("service_ids", [])),
            shift_start=item.get("shift_start"),
            shift_end=item.get("shift_end"),
        )
        for item in data.get("staff", [])
    ]
    return SalonSeed(branches=branches, services=services, staff=staff)
