from __future__ import annotations

from salonbot.application.ports.message_platform import MessagePlatformPort
from salonbot.infrastructure.whatsapp.twilio_client import TwilioWhatsAppClient


class WhatsAppPlatform(MessagePlatformPort):
    def __init__(self, client: TwilioWhatsAppClient) -> None:
        self._client = client

    def send_text(self, recipient_id: str, text: str) -> None:
        self._client.send_text(to=recipient_id, body=text)
