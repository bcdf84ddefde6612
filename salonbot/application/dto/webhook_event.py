from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field

from salonbot.domain.entities.message import Message

WHATSAPP_PREFIX = "whatsapp:"


def strip_whatsapp_prefix(address: str) -> str:
    address = address.strip()
    if address.startswith(WHATSAPP_PREFIX):
        address = address[len(WHATSAPP_PREFIX):]
    return address.strip()


class WhatsAppWebhookDTO(BaseModel):
    """Form fields posted by Twilio for an inbound WhatsApp message."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    from_address: str | None = Field(default=None, alias="From")
    to_address: str | None = Field(default=None, alias="To")
    body: str | None = Field(default=None, alias="Body")
    message_sid: str | None = Field(default=None, alias="MessageSid")

    def extract_message(self, tenant_id: str | None = None) -> Message | None:
        if not self.from_address or self.body is None:
            return None

        phone = strip_whatsapp_prefix(self.from_address)
        if not phone:
            return None

        now = time.time()
        message_id = self.message_sid or f"{phone}:{int(now * 1000)}"
        return Message(
            id=message_id,
            thread_id=phone,
            sender_id=phone,
            text=self.body.strip(),
            timestamp=int(now),
            platform="whatsapp",
            tenant_id=tenant_id,
        )
