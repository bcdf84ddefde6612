from __future__ import annotations

from salonbot.infrastructure.salon.directory_store import InMemoryDirectory
from salonbot.infrastructure.salon.seed_loader import load_salon_seed, parse_salon_seed


def test_bundled_seed_builds_directory():
    directory = InMemoryDirectory(load_salon_seed())

    names = [service.name for service in directory.list_active_services("tenant-demo")]
    assert names == ["Haircut", "Pedicure", "Manicure", "Facial"]
    assert [branch.id for branch in directory.list_branches("tenant-demo")] == ["branch-main"]
    assert {member.name for member in directory.list_service_staff("svc-facial")} == {"Ravi", "Meena"}
    assert directory.get_staff("staff-meena").is_active is False


def test_parse_seed_defaults():
    seed = parse_salon_seed(
        {
            "services": [{"id": 7, "tenant_id": "t1", "name": "Threading"}],
            "staff": [{"id": "s1", "tenant_id": "t1", "name": "Kiran", "service_ids": [7]}],
        }
    )

    service = seed.services[0]
    assert (service.id, service.price, service.duration_minutes, service.is_active) == ("7", 0.0, 30, True)
    member = seed.staff[0]
    assert member.role == "staff"
    assert member.service_ids == ("7",)
    assert member.shift_start is None
    assert seed.branches == []
