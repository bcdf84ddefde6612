from __future__ import annotations

import json
import re
import threading
import time
from datetime import date, datetime
from pathlib import Path
from typing import Any

from salonbot.application.ports.conversation_store import ConversationStorePort
from salonbot.domain.entities.conversation_state import (
    BookingStep,
    ConfirmStep,
    ConversationState,
    DateStep,
    ServiceChoice,
    ServiceStep,
    StaffChoice,
    StaffStep,
    StepState,
    TimeStep,
)
from salonbot.infrastructure.store.memory_store import is_idle

PROCESSED_FILE = "_processed.json"


class JsonConversationStore(ConversationStorePort):
    """One JSON file per phone number, written atomically. Survives restarts of a single process."""

    def __init__(
        self,
        data_dir: str = "./data/conversations",
        idle_timeout_seconds: float = 3600.0,
        processed_limit: int = 1000,
    ) -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._idle_timeout_seconds = idle_timeout_seconds
        self._processed_limit = processed_limit
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # Lock for managing locks dict

    def _get_lock(self, key: str) -> threading.Lock:
        """Get or create a lock for a phone number."""
        with self._lock_lock:
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]

    def _get_file_path(self, phone: str) -> Path:
        safe_name = re.sub(r"[^0-9A-Za-z_-]", "_", phone)
        return self._data_dir / f"{safe_name}.json"

    def _read_json(self, file_path: Path) -> Any:
        if not file_path.exists():
            return None
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError):
            # Corrupted file is treated as missing
            return None

    def _write_json(self, file_path: Path, data: Any) -> None:
        """Save data to a JSON file atomically."""
        temp_path = file_path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(file_path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise

    def get(self, phone: str, now_ts: float | None = None) -> ConversationState | None:
        with self._get_lock(phone):
            file_path = self._get_file_path(phone)
            data = self._read_json(file_path)
            if not data:
                return None
            state = self._deserialize_state(data)
            if state is None:
                return None
            if is_idle(state, self._idle_timeout_seconds, now_ts):
                file_path.unlink(missing_ok=True)
                return None
            return state

    def set(self, phone: str, state: ConversationState) -> None:
        data = self._serialize_state(state)
        if data["updated_at"] is None:
            data["updated_at"] = time.time()
        with self._get_lock(phone):
            self._write_json(self._get_file_path(phone), data)

    def delete(self, phone: str) -> None:
        with self._get_lock(phone):
            self._get_file_path(phone).unlink(missing_ok=True)

    def purge_expired(self, now_ts: float | None = None) -> int:
        removed = 0
        for file_path in self._data_dir.glob("*.json"):
            if file_path.name == PROCESSED_FILE:
                continue
            data = self._read_json(file_path)
            phone = data.get("phone") if isinstance(data, dict) else None
            if not phone:
                continue
            with self._get_lock(phone):
                state = self._deserialize_state(data)
                if state is not None and is_idle(state, self._idle_timeout_seconds, now_ts):
                    file_path.unlink(missing_ok=True)
                    removed += 1
        return removed

    def has_processed(self, message_id: str) -> bool:
        with self._get_lock(PROCESSED_FILE):
            return message_id in self._load_processed()

    def mark_processed(self, message_id: str) -> None:
        with self._get_lock(PROCESSED_FILE):
            processed = self._load_processed()
            if message_id in processed:
                return
            processed.append(message_id)
            # Keep last N processed IDs
            processed = processed[-self._processed_limit :]
            self._write_json(self._data_dir / PROCESSED_FILE, processed)

    def _load_processed(self) -> list[str]:
        data = self._read_json(self._data_dir / PROCESSED_FILE)
        return list(data) if isinstance(data, list) else []

    def _serialize_state(self, state: ConversationState) -> dict[str, Any]:
        return {
            "phone": state.phone,
            "tenant_id": state.tenant_id,
            "updated_at": state.updated_at,
            "step": state.step.value,
            "data": self._serialize_step(state.step_state),
            "version": 1,
        }

    def _serialize_step(self, step: StepState) -> dict[str, Any]:
        if isinstance(step, ServiceStep):
            return {}

        result: dict[str, Any] = {
            "service_id": step.service.service_id,
            "service_name": step.service.service_name,
            "branch_id": step.branch_id,
        }
        if isinstance(step, TimeStep):
            result["selected_date"] = step.selected_date.isoformat()
        if isinstance(step, (StaffStep, ConfirmStep)):
            result["selected_time"] = step.selected_time.isoformat()
        if isinstance(step, StaffStep):
            result["available_staff"] = [_serialize_staff(choice) for choice in step.available_staff]
        if isinstance(step, ConfirmStep):
            result["staff"] = _serialize_staff(step.staff)
        return result

    def _deserialize_state(self, data: dict[str, Any]) -> ConversationState | None:
        phone = data.get("phone")
        if not phone:
            return None
        try:
            step_state = self._deserialize_step(data.get("step"), data.get("data") or {})
        except (KeyError, TypeError, ValueError):
            # Unreadable step data restarts the conversation
            step_state = ServiceStep()
        return ConversationState(
            phone=phone,
            tenant_id=data.get("tenant_id"),
            step_state=step_state,
            updated_at=data.get("updated_at"),
        )

    def _deserialize_step(self, step: str | None, data: dict[str, Any]) -> StepState:
        booking_step = BookingStep(step or BookingStep.SELECTING_SERVICE.value)
        if booking_step is BookingStep.SELECTING_SERVICE:
            return ServiceStep()

        service = ServiceChoice(service_id=data["service_id"], service_name=data["service_name"])
        branch_id = data.get("branch_id")

        if booking_step is BookingStep.SELECTING_DATE:
            return DateStep(service=service, branch_id=branch_id)
        if booking_step is BookingStep.SELECTING_TIME:
            return TimeStep(
                service=service,
                selected_date=date.fromisoformat(data["selected_date"]),
                branch_id=branch_id,
            )

        selected_time = datetime.fromisoformat(data["selected_time"])
        if booking_step is BookingStep.SELECTING_STAFF:
            return StaffStep(
                service=service,
                branch_id=data["branch_id"],
                selected_time=selected_time,
                available_staff=tuple(_deserialize_staff(item) for item in data.get("available_staff") or []),
            )
        return ConfirmStep(
            service=service,
            branch_id=data["branch_id"],
            selected_time=selected_time,
            staff=_deserialize_staff(data["staff"]),
        )


def _serialize_staff(choice: StaffChoice) -> dict[str, str]:
    return {"staff_id": choice.staff_id, "name": choice.name, "role": choice.role}


def _deserialize_staff(data: dict[str, Any]) -> StaffChoice:
    return StaffChoice(staff_id=data["staff_id"], name=data["name"], role=data.get("role", ""))
