from __future__ import annotations

import logging

from salonbot.application.ports.conversation_store import ConversationStorePort
from salonbot.application.ports.directory import DirectoryPort
from salonbot.application.use_cases.booking_conversation import ConversationBookingUseCase
from salonbot.application.use_cases.classify_intent import ClassifyIntentUseCase
from salonbot.application.use_cases.send_reply import SendReplyUseCase
from salonbot.domain.entities.message import Message

GREETING_REPLY = (
    "Thank you for contacting us! How can we help you today? "
    "Reply with a service name to book an appointment."
)


class HandleIncomingMessageUseCase:
    def __init__(
        self,
        store: ConversationStorePort,
        directory: DirectoryPort,
        classify_intent: ClassifyIntentUseCase,
        booking: ConversationBookingUseCase,
        send_reply: SendReplyUseCase,
        default_tenant_id: str | None = None,
    ) -> None:
        self._store = store
        self._directory = directory
        self._classify_intent = classify_intent
        self._booking = booking
        self._send_reply = send_reply
        self._default_tenant_id = default_tenant_id
        self._logger = logging.getLogger(__name__)

    def handle(self, message: Message) -> str | None:
        """Answer one inbound message and send the reply. Returns the reply text, None if skipped."""
        try:
            if self._store.has_processed(message.id):
                self._logger.info("Duplicate message ignored", extra={"message_id": message.id})
                return None
            self._store.mark_processed(message.id)

            tenant_id = message.tenant_id or self._default_tenant_id
            reply = self.build_reply(message.sender_id, message.text, tenant_id)

            self._send_reply.execute(recipient_id=message.sender_id, text=reply)
            return reply
        except Exception as e:
            self._logger.exception(
                "Failed to handle incoming message",
                extra={
                    "message_id": message.id,
                    "phone": message.sender_id,
                    "error_type": type(e).__name__,
                    "error": str(e),
                },
            )
            return None

    def build_reply(self, phone: str, text: str, tenant_id: str | None) -> str:
        if self._booking.has_active_conversation(phone):
            return self._booking.process_message(phone, text, tenant_id)

        service_names = [service.name for service in self._directory.list_active_services(tenant_id or "")]
        classification = self._classify_intent.execute(text, service_names)
        self._logger.info(
            "Intent classified",
            extra={"phone": phone, "intent": classification.intent, "service": classification.service},
        )
        if classification.is_booking:
            return self._booking.process_message(phone, text, tenant_id)
        return GREETING_REPLY
