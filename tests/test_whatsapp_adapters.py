from __future__ import annotations

import httpx
import pytest

from salonbot.application.dto.webhook_event import WhatsAppWebhookDTO
from salonbot.application.exceptions import MessagingUpstreamError
from salonbot.infrastructure.whatsapp.twilio_client import TwilioWhatsAppClient, whatsapp_address
from salonbot.infrastructure.whatsapp.webhook_verify import compute_signature, verify_post_signature

URL = "https://salon.example.com/webhooks/whatsapp"
PARAMS = {"From": "whatsapp:+911234567890", "Body": "pedicure", "MessageSid": "SM1"}


def test_signature_round_trip():
    signature = compute_signature(URL, PARAMS, "secret")
    assert verify_post_signature(URL, PARAMS, signature, "secret", "prod")
    assert not verify_post_signature(URL, {**PARAMS, "Body": "facial"}, signature, "secret", "prod")
    assert not verify_post_signature(URL, PARAMS, signature, "other", "prod")


def test_missing_signature_only_accepted_in_dev():
    assert verify_post_signature(URL, PARAMS, None, "secret", "dev")
    assert not verify_post_signature(URL, PARAMS, None, "secret", "prod")
    assert not verify_post_signature(URL, PARAMS, "abc", None, "prod")


def test_webhook_dto_extracts_message():
    message = WhatsAppWebhookDTO.model_validate(PARAMS).extract_message(tenant_id="t1")
    assert message.id == "SM1"
    assert message.sender_id == "+911234567890"
    assert message.text == "pedicure"
    assert message.platform == "whatsapp"
    assert message.tenant_id == "t1"


def test_webhook_dto_without_sender_is_ignored():
    assert WhatsAppWebhookDTO.model_validate({"Body": "hi"}).extract_message() is None


def test_whatsapp_address_prefix():
    assert whatsapp_address("+911234567890") == "whatsapp:+911234567890"
    assert whatsapp_address("whatsapp:+911234567890") == "whatsapp:+911234567890"


def test_twilio_client_posts_message():
    captured: dict[str, httpx.Request] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["request"] = request
        return httpx.Response(201, json={"sid": "SM42"})

    client = TwilioWhatsAppClient(
        account_sid="AC1",
        auth_token="token",
        from_number="+14155238886",
        base_url="https://api.example.com/2010-04-01",
        transport=httpx.MockTransport(handler),
    )

    assert client.send_text("+911234567890", "hello") == "SM42"

    request = captured["request"]
    assert str(request.url) == "https://api.example.com/2010-04-01/Accounts/AC1/Messages.json"
    body = request.content.decode()
    assert "To=whatsapp%3A%2B911234567890" in body
    assert "From=whatsapp%3A%2B14155238886" in body
    assert "Body=hello" in body
    assert request.headers["Authorization"].startswith("Basic ")


def test_twilio_client_raises_on_error_status():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(400, json={"code": 21211, "message": "Invalid 'To' Phone Number"})
    )
    client = TwilioWhatsAppClient(account_sid="AC1", auth_token="token", from_number="+1", transport=transport)

    with pytest.raises(MessagingUpstreamError):
        client.send_text("bad", "hello")
