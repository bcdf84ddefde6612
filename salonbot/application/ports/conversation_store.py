from abc import ABC, abstractmethod

from salonbot.domain.entities.conversation_state import ConversationState


class ConversationStorePort(ABC):
    @abstractmethod
    def get(self, phone: str, now_ts: float | None = None) -> ConversationState | None:
        """
        Return the conversation for a phone number.
        Conversations idle for longer than the store's timeout are dropped and reported as missing.
        """
        raise NotImplementedError

    @abstractmethod
    def set(self, phone: str, state: ConversationState) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, phone: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def purge_expired(self, now_ts: float | None = None) -> int:
        """Remove every idle conversation. Returns the number removed."""
        raise NotImplementedError

    @abstractmethod
    def has_processed(self, message_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def mark_processed(self, message_id: str) -> None:
        raise NotImplementedError
