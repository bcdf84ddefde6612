from __future__ import annotations

import time
from collections import OrderedDict

from salonbot.application.ports.conversation_store import ConversationStorePort
from salonbot.domain.entities.conversation_state import ConversationState


class MemoryConversationStore(ConversationStorePort):
    """Process-local conversation map. Only valid for a single worker process."""

    def __init__(self, idle_timeout_seconds: float = 3600.0, processed_limit: int = 1000) -> None:
        self._states: dict[str, ConversationState] = {}
        self._processed: OrderedDict[str, None] = OrderedDict()
        self._idle_timeout_seconds = idle_timeout_seconds
        self._processed_limit = processed_limit

    def get(self, phone: str, now_ts: float | None = None) -> ConversationState | None:
        state = self._states.get(phone)
        if state is None:
            return None
        if is_idle(state, self._idle_timeout_seconds, now_ts):
            del self._states[phone]
            return None
        return state

    def set(self, phone: str, state: ConversationState) -> None:
        if state.updated_at is None:
            state = ConversationState(
                phone=state.phone,
                tenant_id=state.tenant_id,
                step_state=state.step_state,
                updated_at=time.time(),
            )
        self._states[phone] = state

    def delete(self, phone: str) -> None:
        self._states.pop(phone, None)

    def purge_expired(self, now_ts: float | None = None) -> int:
        expired = [
            phone
            for phone, state in self._states.items()
            if is_idle(state, self._idle_timeout_seconds, now_ts)
        ]
        for phone in expired:
            del self._states[phone]
        return len(expired)

    def has_processed(self, message_id: str) -> bool:
        return message_id in self._processed

    def mark_processed(self, message_id: str) -> None:
        self._processed[message_id] = None
        while len(self._processed) > self._processed_limit:
            self._processed.popitem(last=False)


def is_idle(state: ConversationState, idle_timeout_seconds: float, now_ts: float | None) -> bool:
    if state.updated_at is None or idle_timeout_seconds <= 0:
        return False
    if now_ts is None:
        now_ts = time.time()
    return now_ts - state.updated_at > idle_timeout_seconds
