from __future__ import annotations

import logging
from urllib.parse import parse_qsl

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse

from salonbot.api.schemas import SendMessageRequestSchema, StatusResponseSchema
from salonbot.application.dto.webhook_event import WhatsAppWebhookDTO
from salonbot.application.exceptions import MessagingUpstreamError
from salonbot.application.ports.message_platform import MessagePlatformPort
from salonbot.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from salonbot.core.config import settings
from salonbot.infrastructure.whatsapp.webhook_verify import verify_post_signature
from salonbot.wiring.dependencies import get_handle_incoming_message_use_case, get_message_platform


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/webhooks/whatsapp")
async def whatsapp_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    use_case: HandleIncomingMessageUseCase = Depends(get_handle_incoming_message_use_case),
) -> Response:
    try:
        body = await request.body()
        try:
            params = dict(parse_qsl(body.decode("utf-8"), keep_blank_values=True)) if body else {}
        except UnicodeDecodeError:
            logger.exception("Failed to decode webhook body")
            return Response(status_code=400)

        url = settings.PUBLIC_WEBHOOK_URL or str(request.url)
        signature = request.headers.get("X-Twilio-Signature")
        if not verify_post_signature(url, params, signature, settings.WHATSAPP_AUTH_TOKEN, settings.ENV):
            return Response(status_code=403)

        event = WhatsAppWebhookDTO.model_validate(params)
        message = event.extract_message(tenant_id=settings.DEFAULT_TENANT_ID)
        if message is None:
            logger.info("Webhook without message ignored")
            return JSONResponse({"status": "ignored"})

        logger.info("Webhook received", extra={"message_id": message.id, "phone": message.sender_id})
        background_tasks.add_task(use_case.handle, message)
        return JSONResponse({"status": "ok"})
    except Exception as e:
        logger.exception("Fatal error in webhook handler", extra={"error": str(e)})
        return Response(status_code=500)


@router.post("/whatsapp/send", response_model=StatusResponseSchema)
def send_message(
    req: SendMessageRequestSchema,
    platform: MessagePlatformPort = Depends(get_message_platform),
):
    if not req.to or not req.message:
        raise HTTPException(status_code=400, detail="to and message are required")
    try:
        platform.send_text(recipient_id=req.to, text=req.message)
    except MessagingUpstreamError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return StatusResponseSchema(status="sent")
