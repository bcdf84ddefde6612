import pytest

from harness import BookingHarness, build_harness, make_service, make_staff


@pytest.fixture
def pedicure_salon() -> BookingHarness:
    """One branch, one service "Pedicure" (400, 30 min) and one active staff member "Asha"."""
    return build_harness(
        services=[make_service("svc-pedicure", "Pedicure", price=400, duration=30)],
        staff=[make_staff("staff-asha", "Asha", ("svc-pedicure",))],
    )


@pytest.fixture
def two_stylist_salon() -> BookingHarness:
    return build_harness(
        services=[make_service("svc-haircut", "Haircut", price=300, duration=45)],
        staff=[
            make_staff("staff-asha", "Asha", ("svc-haircut",), role="stylist"),
            make_staff("staff-ravi", "Ravi", ("svc-haircut",), role="senior stylist"),
        ],
    )
