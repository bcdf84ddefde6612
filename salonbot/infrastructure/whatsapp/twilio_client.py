from __future__ import annotations

import logging

import httpx

from salonbot.application.exceptions import MessagingUpstreamError

WHATSAPP_PREFIX = "whatsapp:"


def whatsapp_address(number: str) -> str:
    number = number.strip()
    return number if number.startswith(WHATSAPP_PREFIX) else f"{WHATSAPP_PREFIX}{number}"


class TwilioWhatsAppClient:
    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        base_url: str = "https://api.twilio.com/2010-04-01",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._account_sid = account_sid
        self._from_number = from_number
        self._messages_url = f"{base_url.rstrip('/')}/Accounts/{account_sid}/Messages.json"
        self._client = httpx.Client(timeout=10.0, auth=(account_sid, auth_token), transport=transport)
        self._logger = logging.getLogger(__name__)

    def send_text(self, to: str, body: str) -> str | None:
        """Send a WhatsApp message. Returns the provider message SID."""
        payload = {
            "From": whatsapp_address(self._from_number),
            "To": whatsapp_address(to),
            "Body": body,
        }
        try:
            resp = self._client.post(self._messages_url, data=payload)
        except httpx.HTTPError as e:
            self._logger.error("WhatsApp send failed", extra={"phone": to, "error": str(e)})
            raise MessagingUpstreamError(f"WhatsApp send failed: {e}") from e

        if resp.status_code >= 400:
            try:
                error_json = resp.json()
                error_code = error_json.get("code")
                error_message = error_json.get("message")
            except ValueError:
                error_code = None
                error_message = resp.text

            self._logger.error(
                "WhatsApp send failed",
                extra={
                    "status": resp.status_code,
                    "error_code": error_code,
                    "error_message": error_message,
                    "phone": to,
                    "text_length": len(body),
                },
            )
            raise MessagingUpstreamError(f"WhatsApp send failed with status {resp.status_code}: {error_message}")

        self._logger.info("WhatsApp message sent", extra={"phone": to})
        return resp.json().get("sid")
