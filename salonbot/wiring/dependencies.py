from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from salonbot.core.config import settings
from salonbot.application.ports.conversation_store import ConversationStorePort
from salonbot.application.ports.message_platform import MessagePlatformPort
from salonbot.application.use_cases.booking_conversation import ConversationBookingUseCase
from salonbot.application.use_cases.classify_intent import ClassifyIntentUseCase
from salonbot.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from salonbot.application.use_cases.send_reminders import SendAppointmentRemindersUseCase
from salonbot.application.use_cases.send_reply import SendReplyUseCase
from salonbot.infrastructure.salon.appointment_store import InMemoryAppointmentStore
from salonbot.infrastructure.salon.client_store import InMemoryClientRegistry
from salonbot.infrastructure.salon.directory_store import InMemoryDirectory
from salonbot.infrastructure.salon.seed_loader import load_salon_seed
from salonbot.infrastructure.store.json_store import JsonConversationStore
from salonbot.infrastructure.store.memory_store import MemoryConversationStore
from salonbot.infrastructure.whatsapp.mock_platform import MockWhatsAppPlatform
from salonbot.infrastructure.whatsapp.twilio_client import TwilioWhatsAppClient
from salonbot.infrastructure.whatsapp.whatsapp_platform import WhatsAppPlatform


_conversation_store: ConversationStorePort | None = None

logger = logging.getLogger(__name__)


def get_timezone() -> ZoneInfo:
    try:
        return ZoneInfo(settings.BUSINESS_TIMEZONE)
    except Exception:
        logger.warning("Unknown BUSINESS_TIMEZONE, falling back to UTC", extra={"reason": settings.BUSINESS_TIMEZONE})
        return ZoneInfo("UTC")


def get_conversation_store() -> ConversationStorePort:
    global _conversation_store
    if _conversation_store is None:
        idle_timeout = settings.CONVERSATION_IDLE_TIMEOUT_MINUTES * 60
        if settings.CONVERSATION_STORE.lower() == "json":
            _conversation_store = JsonConversationStore(
                data_dir=settings.CONVERSATION_DATA_DIR,
                idle_timeout_seconds=idle_timeout,
            )
        else:
            _conversation_store = MemoryConversationStore(idle_timeout_seconds=idle_timeout)
    return _conversation_store


@lru_cache
def get_directory() -> InMemoryDirectory:
    return InMemoryDirectory(load_salon_seed(settings.SALON_SEED_FILE))


@lru_cache
def get_appointment_store() -> InMemoryAppointmentStore:
    return InMemoryAppointmentStore(conflict_window_minutes=settings.CONFLICT_WINDOW_MINUTES)


@lru_cache
def get_client_registry() -> InMemoryClientRegistry:
    return InMemoryClientRegistry()


@lru_cache
def get_message_platform() -> MessagePlatformPort:
    configured = bool(
        settings.WHATSAPP_ACCOUNT_SID and settings.WHATSAPP_AUTH_TOKEN and settings.WHATSAPP_PHONE_NUMBER
    )
    logger.info("WhatsApp credentials present=%s ENV=%s", configured, settings.ENV)

    if not configured:
        if settings.ENV.lower() in {"dev", "local", "test"}:
            logger.info("Using MockWhatsAppPlatform (credentials missing, ENV=%s)", settings.ENV)
            return MockWhatsAppPlatform()
        raise ValueError("WHATSAPP_ACCOUNT_SID, WHATSAPP_AUTH_TOKEN and WHATSAPP_PHONE_NUMBER are required.")

    client = TwilioWhatsAppClient(
        account_sid=settings.WHATSAPP_ACCOUNT_SID,
        auth_token=settings.WHATSAPP_AUTH_TOKEN,
        from_number=settings.WHATSAPP_PHONE_NUMBER,
        base_url=settings.TWILIO_API_BASE_URL,
    )
    return WhatsAppPlatform(client=client)


def get_send_reply_use_case() -> SendReplyUseCase:
    return SendReplyUseCase(platform=get_message_platform())


def get_booking_use_case() -> ConversationBookingUseCase:
    return ConversationBookingUseCase(
        store=get_conversation_store(),
        directory=get_directory(),
        appointments=get_appointment_store(),
        clients=get_client_registry(),
        timezone=get_timezone(),
        conflict_window_minutes=settings.CONFLICT_WINDOW_MINUTES,
    )


def get_handle_incoming_message_use_case() -> HandleIncomingMessageUseCase:
    return HandleIncomingMessageUseCase(
        store=get_conversation_store(),
        directory=get_directory(),
        classify_intent=ClassifyIntentUseCase(),
        booking=get_booking_use_case(),
        send_reply=get_send_reply_use_case(),
        default_tenant_id=settings.DEFAULT_TENANT_ID,
    )


def get_reminders_use_case() -> SendAppointmentRemindersUseCase:
    return SendAppointmentRemindersUseCase(
        appointments=get_appointment_store(),
        directory=get_directory(),
        clients=get_client_registry(),
        send_reply=get_send_reply_use_case(),
        timezone=get_timezone(),
        lead_minutes=settings.REMINDER_LEAD_MINUTES,
    )


def get_container() -> dict[str, object]:
    return {
        "use_case": get_handle_incoming_message_use_case(),
        "store": get_conversation_store(),
        "appointments": get_appointment_store(),
    }
