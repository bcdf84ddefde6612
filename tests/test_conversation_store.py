"""
Tests for conversation persistence and idle expiry.
"""

from __future__ import annotations

import json
import tempfile
from datetime import date, datetime
from pathlib import Path

from harness import TZ
from salonbot.domain.entities.conversation_state import (
    BookingStep,
    ConfirmStep,
    ConversationState,
    DateStep,
    ServiceChoice,
    StaffChoice,
    StaffStep,
    TimeStep,
)
from salonbot.infrastructure.store.json_store import JsonConversationStore
from salonbot.infrastructure.store.memory_store import MemoryConversationStore

PHONE = "+911234567890"
SERVICE = ServiceChoice(service_id="svc-pedicure", service_name="Pedicure")
ASHA = StaffChoice(staff_id="staff-asha", name="Asha", role="stylist")
RAVI = StaffChoice(staff_id="staff-ravi", name="Ravi", role="senior stylist")
SELECTED = datetime(2026, 10, 20, 11, 0, tzinfo=TZ)


def test_memory_store_set_get_delete():
    store = MemoryConversationStore()
    state = ConversationState(phone=PHONE, tenant_id="t1", step_state=DateStep(service=SERVICE), updated_at=100.0)

    store.set(PHONE, state)
    assert store.get(PHONE, now_ts=200.0) == state

    store.delete(PHONE)
    assert store.get(PHONE, now_ts=200.0) is None


def test_memory_store_stamps_missing_updated_at():
    store = MemoryConversationStore()
    store.set(PHONE, ConversationState(phone=PHONE))
    assert store.get(PHONE).updated_at is not None


def test_memory_store_expires_idle_conversations():
    store = MemoryConversationStore(idle_timeout_seconds=60)
    store.set(PHONE, ConversationState(phone=PHONE, updated_at=1000.0))
    store.set("+910000000000", ConversationState(phone="+910000000000", updated_at=1050.0))

    assert store.purge_expired(now_ts=1100.0) == 1
    assert store.get(PHONE, now_ts=1100.0) is None
    assert store.get("+910000000000", now_ts=1100.0) is not None
    assert store.get("+910000000000", now_ts=1200.0) is None


def test_memory_store_processed_ids_are_bounded():
    store = MemoryConversationStore(processed_limit=2)
    for message_id in ("a", "b", "c"):
        store.mark_processed(message_id)

    assert not store.has_processed("a")
    assert store.has_processed("b")
    assert store.has_processed("c")


def test_json_store_round_trips_every_step():
    states = [
        ConversationState(phone=PHONE, tenant_id="t1", updated_at=10.0),
        ConversationState(phone=PHONE, tenant_id="t1", step_state=DateStep(service=SERVICE, branch_id="b1"), updated_at=10.0),
        ConversationState(
            phone=PHONE,
            tenant_id="t1",
            step_state=TimeStep(service=SERVICE, selected_date=date(2026, 10, 25)),
            updated_at=10.0,
        ),
        ConversationState(
            phone=PHONE,
            tenant_id="t1",
            step_state=StaffStep(service=SERVICE, branch_id="b1", selected_time=SELECTED, available_staff=(ASHA, RAVI)),
            updated_at=10.0,
        ),
        ConversationState(
            phone=PHONE,
            tenant_id="t1",
            step_state=ConfirmStep(service=SERVICE, branch_id="b1", selected_time=SELECTED, staff=ASHA),
            updated_at=10.0,
        ),
    ]
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonConversationStore(data_dir=tmpdir)
        for state in states:
            store.set(PHONE, state)
            assert store.get(PHONE, now_ts=20.0) == state


def test_json_store_survives_new_instance():
    with tempfile.TemporaryDirectory() as tmpdir:
        JsonConversationStore(data_dir=tmpdir).set(
            PHONE,
            ConversationState(phone=PHONE, step_state=DateStep(service=SERVICE, branch_id="b1"), updated_at=10.0),
        )

        reopened = JsonConversationStore(data_dir=tmpdir)
        state = reopened.get(PHONE, now_ts=20.0)
        assert state.step is BookingStep.SELECTING_DATE
        assert state.step_state.service == SERVICE


def test_json_store_delete_and_expiry():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonConversationStore(data_dir=tmpdir, idle_timeout_seconds=60)
        store.set(PHONE, ConversationState(phone=PHONE, updated_at=1000.0))
        store.set("+910000000000", ConversationState(phone="+910000000000", updated_at=1000.0))

        store.delete("+910000000000")
        assert store.get("+910000000000", now_ts=1001.0) is None

        assert store.purge_expired(now_ts=2000.0) == 1
        assert list(Path(tmpdir).glob("*.json")) == []


def test_json_store_corrupted_file_is_missing():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonConversationStore(data_dir=tmpdir)
        store.set(PHONE, ConversationState(phone=PHONE, updated_at=10.0))
        file_path = next(Path(tmpdir).glob("*.json"))
        file_path.write_text("{not json", encoding="utf-8")

        assert store.get(PHONE, now_ts=20.0) is None


def test_json_store_unreadable_step_restarts_conversation():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonConversationStore(data_dir=tmpdir)
        store.set(PHONE, ConversationState(phone=PHONE, updated_at=10.0))
        file_path = next(Path(tmpdir).glob("*.json"))
        data = json.loads(file_path.read_text(encoding="utf-8"))
        data["step"] = "selecting_staff"
        data["data"] = {"service_id": "svc-pedicure"}
        file_path.write_text(json.dumps(data), encoding="utf-8")

        assert store.get(PHONE, now_ts=20.0).step is BookingStep.SELECTING_SERVICE


def test_json_store_processed_ids():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonConversationStore(data_dir=tmpdir)
        assert not store.has_processed("SM1")
        store.mark_processed("SM1")
        assert store.has_processed("SM1")
        assert JsonConversationStore(data_dir=tmpdir).has_processed("SM1")
