from fastapi import APIRouter, Depends

from salonbot.api.schemas import ReminderRunResponseSchema
from salonbot.application.ports.conversation_store import ConversationStorePort
from salonbot.application.use_cases.send_reminders import SendAppointmentRemindersUseCase
from salonbot.wiring.dependencies import get_conversation_store, get_reminders_use_case

router = APIRouter()


@router.post("/jobs/reminders", response_model=ReminderRunResponseSchema)
def run_reminders(
    uc: SendAppointmentRemindersUseCase = Depends(get_reminders_use_case),
    store: ConversationStorePort = Depends(get_conversation_store),
):
    """Run once per scheduler tick: send due reminders and drop abandoned conversations."""
    sent = uc.execute()
    expired = store.purge_expired()
    return ReminderRunResponseSchema(sent=sent, expired_conversations=expired)
